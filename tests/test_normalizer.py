from caption_collector.transcript.normalizer import normalize


def test_normalize_lowercases_and_strips_listed_punctuation() -> None:
    assert normalize("Hello, World!") == "hello world"
    assert normalize("Isn’t it? \"Yes\".") == "isnt it yes"
    assert normalize("it's") == "its"


def test_normalize_collapses_and_trims_whitespace() -> None:
    assert normalize("  so   we\tshould \n go  ") == "so we should go"


def test_normalize_keeps_other_punctuation() -> None:
    assert normalize("Q3: revenue - up 5%") == "q3: revenue - up 5%"


def test_normalize_punctuation_only_and_empty() -> None:
    assert normalize("...?!") == ""
    assert normalize("") == ""
