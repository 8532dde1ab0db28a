# Copyright 2026 Firefly Software Solutions Inc.
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
"""webcharset web layer — filters, filter chain and the Starlette adapter."""

from webcharset.web.chain import ApplicationFilterChain
from webcharset.web.character_encoding import CharacterEncodingFilter
from webcharset.web.filters import OncePerRequestFilter
from webcharset.web.ports.filter import FilterChain, WebFilter
from webcharset.web.ports.http import HttpRequest, HttpResponse

__all__ = [
    "ApplicationFilterChain",
    "CharacterEncodingFilter",
    "FilterChain",
    "HttpRequest",
    "HttpResponse",
    "OncePerRequestFilter",
    "WebFilter",
]
