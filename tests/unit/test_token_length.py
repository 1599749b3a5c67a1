"""Unit tests for token estimation and context-window validation."""

import json

import pytest

from toolweave.errors import TokenLimitExceededError
from toolweave.llm import TOKEN_LIMITS, TokenLengthValidator


class TestTokenLength:
    def test_text(self):
        assert TokenLengthValidator().token_length("a" * 40) == 10

    def test_dict_uses_json(self):
        message = {"role": "user", "content": "hello"}

        assert TokenLengthValidator().token_length(message) == len(json.dumps(message)) // 4

    def test_list_sums_items(self):
        validator = TokenLengthValidator()

        assert validator.token_length(["a" * 8, "b" * 12]) == 5

    def test_custom_ratio(self):
        assert TokenLengthValidator(chars_per_token=2).token_length("abcd") == 2


class TestValidateMaxTokens:
    def test_leftover(self):
        assert TokenLengthValidator().validate_max_tokens("a" * 40, limit=100) == 90

    def test_known_model(self):
        leftover = TokenLengthValidator().validate_max_tokens("a" * 40, model="gpt-4")

        assert leftover == TOKEN_LIMITS["gpt-4"] - 10

    def test_unknown_model(self):
        assert TokenLengthValidator().validate_max_tokens("text", model="mystery") is None

    def test_exceeded(self):
        with pytest.raises(TokenLimitExceededError, match="maximum context length is 5 tokens") as exc_info:
            TokenLengthValidator().validate_max_tokens("a" * 40, limit=5)

        assert exc_info.value.token_overflow == 5

    def test_custom_limits(self):
        validator = TokenLengthValidator(token_limits={"tiny": 1})

        with pytest.raises(TokenLimitExceededError):
            validator.validate_max_tokens("a" * 8, model="tiny")
        assert validator.token_limit("gpt-4") is None
