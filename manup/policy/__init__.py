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

"""Update decision policy for ManUp.

Modules:

decision : module
    Classify a running version as proceed, optional, mandatory or disabled.

Public API:

classify : function
    Decide what the running app must do under a platform policy.

Example:
    from manup.policy import classify

    classification = classify(policy, "1.9.9")

"""

from .decision import classify

__all__ = ["classify"]
