# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Descriptor loading for rubydockerfile.

This package reads the App Engine descriptor (app.yaml) and provides total
accessors for its loosely-typed values.

Public API:

- load_descriptor: Locate, read and parse app.yaml from a workspace
- effective_app_yaml_path: The path load_descriptor would use
- Descriptor: The parsed document and its extracted sections
- as_mapping, as_list, as_text: Coercion helpers for YAML values

Example:
    Basic usage:

        from pathlib import Path
        from rubydockerfile.config import load_descriptor

        descriptor = load_descriptor(Path("/workspace"))
        print(descriptor.runtime_config.get("entrypoint"))

"""

from .coerce import as_list, as_mapping, as_text
from .loader import Descriptor, effective_app_yaml_path, load_descriptor

__all__ = [
    "Descriptor",
    "as_list",
    "as_mapping",
    "as_text",
    "effective_app_yaml_path",
    "load_descriptor",
]
