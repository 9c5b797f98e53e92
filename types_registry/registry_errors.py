#!/usr/bin/env python3


class RegistryPublishError(Exception):
    """Base exception for types-registry publishing failures."""
    pass
