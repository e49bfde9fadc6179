"""
Build-target settings.

Environment variables:
    STRUCTYPE_FORM       annotation form for the build: "current" (default) or "legacy"
    STRUCTYPE_LOG_LEVEL  logging level used by the CLI (default WARNING)
    STRUCTYPE_DELIMITER  separator between key/value pairs in raw meta text (default ",")
"""
from __future__ import annotations

import logging
import os
from typing import Literal, Optional

from pydantic import BaseModel

from structype.core.errors import ConfigurationError

AnnotationForm = Literal["legacy", "current"]

FORMS = ("legacy", "current")
DEFAULT_FORM: AnnotationForm = "current"
DEFAULT_DELIMITER = ","

_RESERVED_DELIMITERS = ("=", '"', "'")


class StructypeSettings(BaseModel):
    form: AnnotationForm = DEFAULT_FORM
    log_level: str = "WARNING"
    delimiter: str = DEFAULT_DELIMITER


def normalize_form(value: Optional[str]) -> AnnotationForm:
    form = (value or DEFAULT_FORM).strip().lower()
    if form not in FORMS:
        raise ConfigurationError(f"Unknown annotation form {value!r}; expected one of {', '.join(FORMS)}")
    return form  # type: ignore[return-value]


def load_settings() -> StructypeSettings:
    form = normalize_form(os.getenv("STRUCTYPE_FORM", DEFAULT_FORM))

    log_level = os.getenv("STRUCTYPE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Unknown log level {log_level!r} in STRUCTYPE_LOG_LEVEL")

    delimiter = os.getenv("STRUCTYPE_DELIMITER", DEFAULT_DELIMITER)
    if len(delimiter) != 1 or delimiter in _RESERVED_DELIMITERS or delimiter.isspace():
        raise ConfigurationError(f"STRUCTYPE_DELIMITER must be a single separator character, got {delimiter!r}")

    return StructypeSettings(form=form, log_level=log_level, delimiter=delimiter)
