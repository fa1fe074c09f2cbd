"""Shared pytest setup: Hypothesis profiles and fuzz test selection.

Profiles (``HYPOTHESIS_PROFILE`` picks one; ``CI=true`` implies ``ci``):
    dev      500 examples, the local default
    ci       50 derandomized examples
    verbose  100 examples with progress output

Tests marked ``fuzz`` (the marker is declared in pyproject.toml) only run
when asked for, with ``pytest -m fuzz`` or ``pytest tests/fuzz``.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

_ALL_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

_PROFILES: dict[str, dict[str, object]] = {
    "dev": {"max_examples": 500},
    "ci": {"max_examples": 50, "derandomize": True, "print_blob": True},
    "verbose": {"max_examples": 100, "verbosity": Verbosity.verbose},
}

for _name, _options in _PROFILES.items():
    settings.register_profile(_name, phases=_ALL_PHASES, **_options)  # type: ignore[arg-type]


def _profile_name() -> str:
    requested = os.environ.get("HYPOTHESIS_PROFILE")
    if requested is not None and requested in _PROFILES:
        return requested
    return "ci" if os.environ.get("CI") == "true" else "dev"


settings.load_profile(_profile_name())


def _fuzz_requested(config: pytest.Config) -> bool:
    if "fuzz" in str(config.getoption("-m", default="")):
        return True
    return any("fuzz" in str(arg) for arg in config.invocation_params.args)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip fuzz-marked tests unless the run asked for them."""
    if _fuzz_requested(config):
        return

    skip_fuzz = pytest.mark.skip(reason="fuzz test: run with pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)
