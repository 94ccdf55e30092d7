from learn_app.core.chapters import DEFAULT_CHAPTERS, ChapterCatalog


def test_default_active_chapter():
    catalog = ChapterCatalog()
    assert catalog.active.name == "Thermodynamics"
    assert len(catalog.filter()) == len(DEFAULT_CHAPTERS)


def test_select_decodes_url_encoded_name():
    catalog = ChapterCatalog()
    catalog.select("Chemical%20kinetics")
    assert catalog.active.name == "Chemical kinetics"
    assert sum(ch.active for ch in catalog.filter()) == 1


def test_select_unknown_name_clears_selection():
    catalog = ChapterCatalog()
    catalog.select("Astrophysics")
    assert catalog.active is None


def test_select_without_name_keeps_selection():
    catalog = ChapterCatalog()
    catalog.select(None)
    catalog.select("")
    assert catalog.active.name == "Thermodynamics"


def test_filter_is_case_insensitive_substring():
    names = [ch.name for ch in ChapterCatalog().filter("CHEM")]
    assert names == [
        "Solid-state chemistry",
        "Electrochemistry",
        "Chemical kinetics",
        "Surface chemistry",
        "Chemistry in everyday life",
    ]
