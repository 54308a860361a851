"""Shared pytest fixtures for dependency analyzer tests."""

from pathlib import Path

import pytest

from dependency_analyzer.config import AnalyzerConfiguration

PODFILE_LOCK = """\
PODS:
  - AFNetworking (3.2.1):
    - AFNetworking/NSURLSession (= 3.2.1)
  - AFNetworking/NSURLSession (3.2.1)
  - Alamofire (4.7.3)
  - SwiftyJSON (4.1.0)

DEPENDENCIES:
  - AFNetworking (~> 3.2)
  - Alamofire (~> 4.7)
  - SwiftyJSON (from `https://github.com/SwiftyJSON/SwiftyJSON.git`, tag `4.1.0`)

SPEC REPOS:
  https://github.com/cocoapods/specs.git:
    - AFNetworking
    - Alamofire

CHECKOUT OPTIONS:
  SwiftyJSON:
    :git: https://github.com/SwiftyJSON/SwiftyJSON.git
    :tag: 4.1.0

COCOAPODS: 1.5.3
"""

CARGO_TOML = """\
[package]
name = "demo"
version = "0.2.0"
license = "MIT/Apache-2.0"
repository = "https://github.com/example/demo/"
homepage = "https://example.com/demo"

[dependencies]
serde = { version = "1.0", features = ["derive"] }
log = "0.4"

[dev-dependencies]
tempfile = "3"
"""

CARGO_LOCK = """\
version = 3

[[package]]
name = "demo"
version = "0.2.0"
dependencies = [
 "log",
 "serde",
 "tempfile",
]

[[package]]
name = "log"
version = "0.4.20"
source = "registry+https://github.com/rust-lang/crates.io-index"
checksum = "b5e6163cb8c49088c2c36f57875e58ccd8c87c7427f7fbd50ea6710b2f3f2e8f"

[[package]]
name = "serde"
version = "1.0.190"
source = "registry+https://github.com/rust-lang/crates.io-index"
checksum = "91d3c334ca1ee894a2c6f6ad698fe8c435b76d504b13d436f0685d648d6d96f7"
dependencies = [
 "serde_derive",
]

[[package]]
name = "serde_derive"
version = "1.0.190"
source = "registry+https://github.com/rust-lang/crates.io-index"

[[package]]
name = "tempfile"
version = "3.8.1"
source = "git+https://github.com/Stebalien/tempfile?branch=master#abc123"
"""


@pytest.fixture
def config():
    return AnalyzerConfiguration()


@pytest.fixture
def pod_project(tmp_path: Path) -> Path:
    """A directory with a Podfile and its Podfile.lock."""
    (tmp_path / "Podfile").write_text("platform :ios, '11.0'\npod 'Alamofire', '~> 4.7'\n")
    (tmp_path / "Podfile.lock").write_text(PODFILE_LOCK)
    return tmp_path


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    (tmp_path / "Cargo.toml").write_text(CARGO_TOML)
    (tmp_path / "Cargo.lock").write_text(CARGO_LOCK)
    return tmp_path


@pytest.fixture
def mixed_project(pod_project: Path) -> Path:
    """A CocoaPods project at the root with a Cargo crate in rust/."""
    rust = pod_project / "rust"
    rust.mkdir()
    (rust / "Cargo.toml").write_text(CARGO_TOML)
    (rust / "Cargo.lock").write_text(CARGO_LOCK)
    return pod_project
