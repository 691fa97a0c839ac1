from ws_relay.gatekeeper import AllowList, Gatekeeper


def test_exact_match_admits():
    gate = Gatekeeper(AllowList(["https://app.example.com"]))
    assert gate.admit("https://app.example.com")
    assert gate.stats.admitted == 1


def test_no_case_folding_or_prefix_match():
    gate = Gatekeeper(AllowList(["https://app.example.com"]))
    assert not gate.admit("https://APP.example.com")
    assert not gate.admit("https://app.example.com/")
    assert not gate.admit("https://app.example.com.evil.test")
    assert gate.stats.rejected == 3


def test_absent_origin_rejected():
    gate = Gatekeeper(AllowList(["https://app.example.com"]))
    assert not gate.admit(None)
    assert not gate.admit("")


def test_empty_allow_list_rejects_all():
    gate = Gatekeeper(AllowList())
    assert not gate.admit("https://app.example.com")
    assert not gate.admit(None)


def test_disabled_check_admits_everything():
    gate = Gatekeeper(AllowList(), check_origin=False)
    assert gate.admit(None)
    assert gate.admit("https://evil.example.com")
    assert gate.stats.admitted == 2


def test_rejection_is_logged(caplog):
    gate = Gatekeeper(AllowList(["https://app.example.com"]))
    with caplog.at_level("WARNING", logger="ws_relay.gatekeeper"):
        gate.admit("https://evil.example.com")
    assert "https://evil.example.com is not allowed" in caplog.text


def test_allow_list_membership_ignores_non_strings():
    allow = AllowList(["a"])
    assert "a" in allow
    assert None not in allow
    assert len(allow) == 1
