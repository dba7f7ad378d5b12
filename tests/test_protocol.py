import pytest

from drinkctl.protocol import (
    FIELD_COUNT,
    PLACEHOLDER,
    Command,
    atoi,
    decode,
    encode,
    parse_command,
    split_fields,
)


def test_command_numbers_on_the_wire():
    assert parse_command("3:") == Command.GETINGREDIENTSNAME
    assert parse_command("17:") == Command.CLEAN_WATER
    assert split_fields(encode(Command.GETINGREDIENTSNAME)) == ["3"]
    assert split_fields(encode(Command.CLEAN_WATER)) == ["17"]


def test_encode_delete_drink():
    assert encode(Command.DELETEDRINK, "Mojito") == "8:Mojito:"


@pytest.mark.parametrize(
    "command,args",
    [
        (Command.CREATEINGREDIENT, ("Rom", 65)),
        (Command.GETDRINKSNAME, ()),
        (Command.CHANGEINGREDIENTADDR, ("Cola", 239)),
    ],
)
def test_encode_split_round_trip(command, args):
    fields = split_fields(encode(command, *args))
    assert fields == [str(int(command))] + [str(a) for a in args]
    assert parse_command(encode(command, *args)) == command


def test_split_drops_unterminated_tail():
    assert split_fields("a:b:c") == ["a", "b"]
    assert split_fields("") == []


def test_decode_pads_to_field_count():
    fields = decode("4:Mojito:Rom:")
    assert len(fields) == FIELD_COUNT
    assert fields[:3] == ["4", "Mojito", "Rom"]
    assert set(fields[3:]) == {PLACEHOLDER}


def test_decode_caps_field_count():
    fields = decode("x:" * (FIELD_COUNT + 10))
    assert len(fields) == FIELD_COUNT
    assert set(fields) == {"x"}


def test_atoi_is_lenient():
    assert atoi("12abc") == 12
    assert atoi("  -7") == -7
    assert atoi("abc") == 0
    assert atoi("") == 0


def test_parse_command_without_separator():
    assert parse_command("5") == Command.GETDRINKSNAME