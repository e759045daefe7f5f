"""
ManUp - Mandatory Update gate

A Python library that decides at application start whether the running
version may proceed, should offer an optional update, must block until
updated, or must block because the app is in maintenance mode.

ManUp provides:
  - Remote JSON version policy per platform (ios, android, windows, ...)
  - Offline fallback to the last good policy document
  - Strict semantic version comparison
  - Single-flight checks shared by every caller
  - Fail-open behavior: a broken check never locks users out
  - Localizable alerts with builtin English text

Quick Start
-----------
    from manup import ManUpConfig, ManUpService, StaticAppIdentity, StaticHost

    service = ManUpService(
        ManUpConfig(url="https://example.com/manup.json"),
        host=StaticHost("ios"),
        identity=StaticAppIdentity("2.0.0", "My App"),
        dialog=my_dialog,
    )
    await service.validate()  # returns only when the app may continue

Policy document
---------------
    {
      "ios":     {"minimum": "2.0.0", "latest": "2.3.1",
                  "url": "https://apps.apple.com/app/id000", "enabled": true},
      "android": {"minimum": "2.0.0", "latest": "2.3.0",
                  "url": "https://play.google.com/store/apps/details?id=x",
                  "enabled": false}
    }

Package Structure
-----------------
service : module
    ManUpService, the single-flight check coordinator.
metadata : module
    MetadataStore, remote fetch with cache fallback.
platforms : module
    Platform branch selection.
policy : package
    Classification of the running version.
versioning : package
    Semantic version parsing and comparison.
presentation : module
    Update alerts and their resolution rules.
storage : package
    Cache collaborators.
config : package
    YAML configuration loading.

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "ManUp - mandatory/optional update gate"

# Re-export commonly used names for convenience
from manup.config import ManUpConfig, load_config
from manup.host import BrowserLauncher, StaticAppIdentity, StaticHost
from manup.metadata import MetadataStore
from manup.models import Classification, PlatformPolicy, PolicyMetadata
from manup.platforms import select
from manup.policy import classify
from manup.results import GateResult
from manup.service import ManUpService
from manup.versioning import Ordering, compare

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "ManUpService",
    "ManUpConfig",
    "load_config",
    "MetadataStore",
    "Classification",
    "PlatformPolicy",
    "PolicyMetadata",
    "GateResult",
    "select",
    "classify",
    "compare",
    "Ordering",
    "StaticHost",
    "StaticAppIdentity",
    "BrowserLauncher",
]
