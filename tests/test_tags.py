from srs_check.tags import is_valid_tag, parse_tag


def test_parse_tag():
    tag = parse_tag("SRS_TEST_MODULE_66_001")
    assert tag.component == "TEST_MODULE"
    assert tag.major == "66"
    assert tag.minor == "001"
    assert str(tag) == "SRS_TEST_MODULE_66_001"


def test_invalid_tags():
    assert not is_valid_tag("SRS_TEST_MODULE")
    assert not is_valid_tag("SRS_TEST_MODULE_66")
    assert not is_valid_tag("SRS__66_001")
    assert not is_valid_tag("SRS_TEST_66_001x")
    assert is_valid_tag("SRS_X_1_2")
