from ampctl.ptt import PttControl
from ampctl.state import GlobalState


def test_set_and_clear_ptt():
    rig = GlobalState()
    ptt = PttControl(rig)
    assert ptt.set(True) is True
    assert rig.ptt is True
    assert ptt.set(False) is False
    assert rig.ptt is False


def test_blocked_refuses_ptt():
    rig = GlobalState()
    ptt = PttControl(rig)
    assert ptt.set_blocked(True) is True
    assert ptt.check_blocked() is True
    assert ptt.set(True) is False
    assert rig.ptt is False


def test_blocked_leaves_existing_ptt_untouched():
    rig = GlobalState()
    ptt = PttControl(rig)
    ptt.set(True)
    ptt.set_blocked(True)
    assert ptt.set(False) is False
    assert rig.ptt is True


def test_unblock_restores_control():
    rig = GlobalState()
    ptt = PttControl(rig)
    ptt.set_blocked(True)
    assert ptt.set_blocked(False) is False
    assert ptt.check_blocked() is False
    assert ptt.set(True) is True


def test_toggle_twice_returns_to_start():
    rig = GlobalState()
    ptt = PttControl(rig)
    assert ptt.toggle() is True
    assert ptt.toggle() is False
    assert rig.ptt is False


def test_toggle_while_blocked():
    rig = GlobalState(tx_blocked=True)
    ptt = PttControl(rig)
    assert ptt.toggle() is False
    assert rig.ptt is False