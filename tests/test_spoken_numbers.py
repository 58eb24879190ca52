from voice.spoken_numbers import convert_numerals, words_to_number


def test_compounds_are_converted_before_simple_words():
    assert convert_numerals("noventa y nueve cajas") == "99 cajas"
    assert convert_numerals("treinta y uno") == "31"
    assert convert_numerals("ciento cuarenta y cinco botellas") == "145 botellas"


def test_simple_words():
    assert convert_numerals("coca cola veinte") == "coca cola 20"
    assert convert_numerals("cero") == "0"
    assert convert_numerals("quinientos") == "500"
    assert convert_numerals("cien sobres") == "100 sobres"


def test_hundreds_with_teens_and_twenties():
    assert convert_numerals("doscientos quince") == "215"
    assert convert_numerals("trescientos veintidós") == "322"
    assert convert_numerals("ciento uno") == "101"


def test_matching_ignores_case_and_extra_spaces():
    assert convert_numerals("Noventa  Y  Nueve") == "99"
    assert convert_numerals("DIECISÉIS latas") == "16 latas"


def test_only_whole_words_are_replaced():
    # "once" dentro de "doncella", "dos" dentro de "dosis"
    assert convert_numerals("doncella dosis") == "doncella dosis"
    assert convert_numerals("cervezas dos, papas tres") == "cervezas 2, papas 3"


def test_text_outside_numbers_is_preserved():
    assert convert_numerals("  agua   mineral  cinco  ") == "  agua   mineral  5  "


def test_numbers_outside_table_pass_through():
    assert convert_numerals("seiscientos vasos") == "seiscientos vasos"
    assert convert_numerals("mil vasos") == "mil vasos"


def test_words_to_number():
    assert words_to_number("noventa y nueve") == 99
    assert words_to_number("Veinte") == 20
    assert words_to_number("cajas") is None
    assert words_to_number("") is None
