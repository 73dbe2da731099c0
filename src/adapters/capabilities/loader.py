"""Capability manifest loading."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from adapters.capabilities.models import CapabilityManifest
from core.domain.errors import CapabilityManifestError


def load_capabilities(path: Path | None) -> CapabilityManifest:
    """Parse the manifest at `path`; no path means no capabilities."""

    if path is None:
        return CapabilityManifest()
    try:
        raw = Path(path).read_text(encoding="utf-8")
        data = json.loads(raw)
        return CapabilityManifest.model_validate(data)
    except OSError as exc:
        raise CapabilityManifestError(f"Cannot read capability manifest {path}: {exc}") from exc
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        raise CapabilityManifestError(f"Invalid capability manifest {path}: {exc}") from exc
