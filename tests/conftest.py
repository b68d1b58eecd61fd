import pytest

from builders import claims, green_pass, lab_test_entry, make_hc1, recovery_entry


@pytest.fixture
def vaccine_hc1():
    return make_hc1()


@pytest.fixture
def recovery_hc1():
    return make_hc1(claims({1: green_pass([recovery_entry()], key="r")}))


@pytest.fixture
def pcr_hc1():
    return make_hc1(claims({1: green_pass([lab_test_entry()], key="t")}))
