from battlesim.battle.models import Combatant, StatBlock
from battlesim.battle.party import Team, resolve_faint


def team(*hps):
    return Team.from_roster(Combatant(name=f"M{i}", level=5, stats=StatBlock(hp, 5, 5, 5, 5)) for i, hp in enumerate(hps))


def test_next_active_is_first_remaining_in_roster_order():
    t = team(10, 5, 50)
    t.active().current_hp = 0
    res = resolve_faint(t, t.active())
    assert not res.team_eliminated
    # roster order, not the healthiest
    assert res.next_active.slot == 1


def test_never_picks_a_fainted_member():
    t = team(10, 10, 10)
    t.members[1].current_hp = 0
    t.fainted.add(1)
    t.active().current_hp = 0
    res = resolve_faint(t, t.active())
    assert res.next_active.slot == 2


def test_elimination_when_nobody_is_left():
    t = team(10, 10)
    t.members[0].current_hp = 0
    first = resolve_faint(t, t.members[0])
    assert first.team_eliminated is False
    t.active_slot = first.next_active.slot
    t.members[1].current_hp = 0
    second = resolve_faint(t, t.members[1])
    assert second.team_eliminated is True
    assert second.next_active is None
    assert t.fainted == {0, 1}


def test_fainted_members_cannot_be_switched_to():
    t = team(10, 10, 10)
    t.members[2].current_hp = 0
    resolve_faint(t, t.members[2])
    assert t.can_switch_to(1)
    assert not t.can_switch_to(2)
    assert not t.can_switch_to(0)  # active
    assert not t.can_switch_to(7)
