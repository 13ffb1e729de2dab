# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from __future__ import annotations


class RelayError(Exception):
    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class BadRequestError(RelayError):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=400)


class MissingCredentialError(RelayError):
    def __init__(self, detail: str = "API key is required"):
        super().__init__(detail=detail, status_code=400)


class UpstreamError(RelayError):
    """Provider answered with a failure; ``status_code`` is the provider's."""


class UpstreamTimeoutError(RelayError):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=504)


class UpstreamConnectionLostError(RelayError):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=503)


class EmptyGenerationError(RelayError):
    def __init__(self, detail: str = "No text generated"):
        super().__init__(detail=detail, status_code=400)


class NoImageGeneratedError(RelayError):
    def __init__(self, detail: str = "No image generated"):
        super().__init__(detail=detail, status_code=400)


class InvalidReferenceImageError(RelayError):
    def __init__(self, detail: str = "Reference image must be a base64 data URL"):
        super().__init__(detail=detail, status_code=400)


class StoryNotFoundError(RelayError):
    def __init__(self, detail: str = "Story not found"):
        super().__init__(detail=detail, status_code=404)


class StoryValidationError(RelayError):
    def __init__(self, detail: str = "Story ID is required"):
        super().__init__(detail=detail, status_code=400)


class StorageWriteError(RelayError):
    def __init__(self, detail: str = "Failed to save story"):
        super().__init__(detail=detail, status_code=500)
