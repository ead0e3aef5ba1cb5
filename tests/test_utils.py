from clinicdesk.core.utils import format_sequence, generate_slug, split_name


def test_split_name():
    assert split_name("Riya Thomas") == ("Riya", "Thomas")
    assert split_name("Anna Maria  Joseph") == ("Anna Maria", "Joseph")
    assert split_name("Madonna") == ("Madonna", "Madonna")


def test_format_sequence():
    assert format_sequence("APT", 1) == "APT000001"
    assert format_sequence("PAT", 1234567) == "PAT1234567"


def test_generate_slug():
    slug = generate_slug("St. Mary's Clinic")
    assert slug.startswith("st-marys-clinic-")
    assert len(slug.rsplit("-", 1)[1]) == 4
