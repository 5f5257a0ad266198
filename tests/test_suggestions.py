from venue_assistant.utils.suggestions import extract_suggestions


def test_bullets_under_heading():
    text = (
        "Here's how to book.\n\n"
        "Would you like to know about:\n"
        "- Paying with points\n"
        "- Cancelling a booking\n"
        "- Seat categories\n"
        "- Vendor payouts\n"
    )
    assert extract_suggestions(text) == ["Paying with points", "Cancelling a booking", "Seat categories"]


def test_markup_is_stripped():
    text = "**Related:**\n\n* **Buying points**\n* `/user/credits` page\n"
    assert extract_suggestions(text) == ["Buying points", "/user/credits page"]


def test_numbered_items():
    text = "You might also be interested in:\n1. Vendor analytics\n2) Reviews\n\nThanks!"
    assert extract_suggestions(text) == ["Vendor analytics", "Reviews"]


def test_list_ends_at_first_non_item():
    text = "Would you also like to know:\n- One\nplain sentence\n- Two"
    assert extract_suggestions(text) == ["One"]


def test_no_heading():
    assert extract_suggestions("1. Browse venues at /venues\n2. Book") == []


def test_heading_without_items():
    assert extract_suggestions("Would you like to know more? Just ask.") == []


def test_empty():
    assert extract_suggestions("") == []
