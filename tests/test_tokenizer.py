"""Tests for ratson.tokenizer."""

import pytest

from ratson import (
    Instruction,
    Mode,
    PRIMARY_TABLE,
    SECONDARY_TABLE,
    StackUnderflowError,
    Tokenizer,
    TokenizerExhausted,
    tokenize,
)
from ratson.tokenizer import step

I = Instruction


class TestTables:
    def test_every_instruction_spelled_once_per_dialect(self):
        for table in (PRIMARY_TABLE, SECONDARY_TABLE):
            assert len(table) == 23
            assert set(table.values()) == set(Instruction)

    def test_new_string_spellings(self):
        assert PRIMARY_TABLE[ord("?")] is I.SNEW
        assert SECONDARY_TABLE[ord("$")] is I.SNEW

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            PRIMARY_TABLE[ord("x")] = I.INEW

    def test_shared_bytes_differ_between_dialects(self):
        assert PRIMARY_TABLE[ord("b")] is I.ISHL
        assert SECONDARY_TABLE[ord("b")] is I.FNAN
        assert PRIMARY_TABLE[ord("?")] is I.SNEW
        assert SECONDARY_TABLE[ord("?")] is I.AADD


class TestStep:
    def test_recognised_byte_keeps_mode(self):
        assert step(Mode.PRIMARY, ord("B")) == (Mode.PRIMARY, I.INEW)

    def test_new_string_flips_mode(self):
        assert step(Mode.PRIMARY, ord("?")) == (Mode.SECONDARY, I.SNEW)
        assert step(Mode.SECONDARY, ord("$")) == (Mode.PRIMARY, I.SNEW)

    def test_unrecognised_byte(self):
        assert step(Mode.PRIMARY, ord("$")) == (Mode.PRIMARY, None)
        assert step(Mode.SECONDARY, 0xFF) == (Mode.SECONDARY, None)


class TestTokenize:
    def test_flip(self):
        assert tokenize(b"b?b") == [I.ISHL, I.SNEW, I.FNAN]

    def test_flip_back(self):
        assert tokenize(b"b?b$b") == [I.ISHL, I.SNEW, I.FNAN, I.SNEW, I.ISHL]

    def test_one_result_per_byte(self):
        assert tokenize(b"x B\n") == [None, None, I.INEW, None]

    def test_unrecognised_only(self):
        assert tokenize(b"xcdfgjklnw 0123456789\n") == [None] * 22

    def test_empty(self):
        assert tokenize(b"") == []

    def test_question_mark_in_secondary_does_not_flip(self):
        assert tokenize(b"??B") == [I.SNEW, I.AADD, None]

    def test_start_mode(self):
        assert tokenize(b"S", mode=Mode.SECONDARY) == [I.INEW]

    def test_deterministic(self):
        program = b"~?Shaaaaaah-Sg$Bubbbbbbu!zM"
        assert tokenize(program) == tokenize(program)


class TestTokenizer:
    def test_initial_state(self):
        tok = Tokenizer(b"B")
        assert tok.pos == 0
        assert tok.mode is Mode.PRIMARY
        assert not tok.exhausted

    def test_step_returns_new_state(self):
        tok = Tokenizer(b"?B")
        nxt, instr = tok.step()
        assert instr is I.SNEW
        assert (nxt.pos, nxt.mode) == (1, Mode.SECONDARY)
        assert (tok.pos, tok.mode) == (0, Mode.PRIMARY)

    def test_step_past_end(self):
        tok = Tokenizer(b"")
        assert tok.exhausted
        with pytest.raises(TokenizerExhausted):
            tok.step()

    def test_exhausted_is_index_error(self):
        with pytest.raises(IndexError):
            Tokenizer(b"B", pos=1).step()

    def test_iteration_is_restartable(self):
        tok = Tokenizer(b"b?b")
        assert list(tok) == list(tok) == [I.ISHL, I.SNEW, I.FNAN]

    def test_iteration_from_mid_stream(self):
        tok, _ = Tokenizer(b"?bb").step()
        assert list(tok) == [I.FNAN, I.FNAN]

    def test_end_tracks_parity(self):
        assert Tokenizer(b"?").end().mode is Mode.SECONDARY
        assert Tokenizer(b"?$").end().mode is Mode.PRIMARY
        assert Tokenizer(b"? x $ y ?").end().mode is Mode.SECONDARY
        assert Tokenizer(b"?$").end().exhausted

    def test_hashable_value(self):
        assert Tokenizer(b"ab") == Tokenizer(b"ab")
        assert len({Tokenizer(b"ab"), Tokenizer(b"ab")}) == 1


def test_underflow_and_exhausted_share_base():
    from ratson import RatsonError
    assert issubclass(TokenizerExhausted, RatsonError)
    assert issubclass(StackUnderflowError, RatsonError)
