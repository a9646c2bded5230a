from lgu_hris.common.names import format_employee_name, format_employee_name_from_string, is_name_extension


def test_format_employee_name_title_cases_parts():
    assert format_employee_name("DELA CRUZ", "JUAN", "SANTOS", "Jr.") == "Dela Cruz, Juan Santos Jr."


def test_format_employee_name_without_first_name():
    assert format_employee_name("reyes", None) == "Reyes"
    assert format_employee_name(None, None) == ""


def test_comma_form():
    assert format_employee_name_from_string("REYES, JUAN SANTOS") == "Reyes, Juan Santos"
    assert format_employee_name_from_string("REYES, JUAN SANTOS III") == "Reyes, Juan Santos III"


def test_first_last_is_the_default_guess():
    assert format_employee_name_from_string("Juan Santos Reyes Jr.") == "Reyes, Juan Santos Jr."
    assert format_employee_name_from_string("juan reyes") == "Reyes, Juan"


def test_last_first_form():
    assert format_employee_name_from_string("Reyes Juan Santos", "LastFirst") == "Reyes, Juan Santos"


def test_extensions():
    assert is_name_extension("JR")
    assert is_name_extension("sr.")
    assert not is_name_extension("Santos")
