"""Tests for the KVError taxonomy."""

import pytest

from kv_image_store.errors import ErrorKind, KVError
from kv_image_store.storage.locks import LockError


class TestKVError:
    """Test KVError construction and conversions."""

    @pytest.mark.parametrize("kind, status", [
        (ErrorKind.BAD_REQUEST, 400),
        (ErrorKind.FORBIDDEN, 403),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.INTERNAL_ERROR, 500),
    ])
    def test_status_code_mapping(self, kind, status):
        """Every classification maps to exactly one HTTP status."""
        assert KVError(kind, "msg").status_code == status

    def test_message_converted_to_text(self):
        """Non-string messages are converted with str()."""
        err = KVError(ErrorKind.BAD_REQUEST, 42)
        assert err.message == "42"

    def test_convenience_constructors(self):
        """Shortcut constructors pick the right classification."""
        assert KVError.not_found().kind is ErrorKind.NOT_FOUND
        assert KVError.not_found().message == "Key not found"
        assert KVError.forbidden("nope").kind is ErrorKind.FORBIDDEN
        assert KVError.bad_request("bad").kind is ErrorKind.BAD_REQUEST
        assert KVError.internal("boom").kind is ErrorKind.INTERNAL_ERROR

    def test_from_lock_error(self):
        """Lock failures become internal errors with a fixed message."""
        err = KVError.from_lock_error(LockError("poisoned"))
        assert err.kind is ErrorKind.INTERNAL_ERROR
        assert err.message == "error writing to store"

    def test_from_image_error(self):
        """Image failures become bad requests with a fixed message."""
        err = KVError.from_image_error(OSError("cannot identify image file"))
        assert err.kind is ErrorKind.BAD_REQUEST
        assert err.message == "error processing image"

    def test_display_and_debug_strings(self):
        """str() is for humans, repr() for logs."""
        err = KVError.not_found()
        assert str(err) == "404: Key not found"
        assert repr(err) == "KVError(kind=NOT_FOUND, message='Key not found')"

    def test_is_exception(self):
        """KVError can be raised and caught like any exception."""
        with pytest.raises(KVError, match="Key not found"):
            raise KVError.not_found()
