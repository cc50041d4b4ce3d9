import pytest
from pydantic import BaseModel, ValidationError

from nailapi.shared.auth import TokenPair, TokenReissueRequest, mask_token
from nailapi.shared.errors import ApiError, ApplicationError, Err, NetworkError, Ok, stringify_pydantic_error


class Profile(BaseModel):
    id: int
    nickname: str


def test_error_hierarchy():
    assert issubclass(NetworkError, ApiError)
    assert issubclass(ApplicationError, ApiError)

    timeout = NetworkError("timed out", code=408)
    assert timeout.is_timeout
    assert not NetworkError("refused").is_timeout
    assert repr(ApplicationError(404, "missing")) == "ApplicationError(code=404, message='missing')"


def test_ok_and_err():
    assert Ok(3).unwrap() == 3
    error = ApplicationError(500, "boom")

    with pytest.raises(ApplicationError) as exc_info:
        Err(error).unwrap()
    assert exc_info.value is error


def test_stringify_pydantic_error():
    with pytest.raises(ValidationError) as exc_info:
        Profile.model_validate({"id": "x"})

    message = stringify_pydantic_error(exc_info.value)
    assert message.splitlines()[0].startswith("id: ")
    assert "nickname: Field required" in message


def test_mask_token():
    assert mask_token(None) == "<empty>"
    assert mask_token("abc") == "***"
    assert mask_token("eyJhbGciOi") == "eyJhbG****"


def test_token_models():
    assert TokenPair().is_empty
    assert not TokenPair(refresh_token="r").is_empty
    assert TokenReissueRequest(refresh_token="r").model_dump(by_alias=True) == {"refreshToken": "r"}
    with pytest.raises(ValidationError):
        TokenReissueRequest(refresh_token="")
