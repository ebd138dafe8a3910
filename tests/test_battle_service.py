import random
import pytest
from battlesim.battle.service import BattleService, DEMO_MATCHUPS
from battlesim.core.errors import IllegalActionError, InvalidRosterError
from battlesim.system.settings import Settings, SettingsData

PLAYER = [
    {"name": "Pikachu", "level": 50, "stats": {"hp": 100, "attack": 50, "defense": 50, "specialAttack": 50, "specialDefense": 50},
     "selectedMoves": [{"name": "Tackle", "power": 40, "type": "physical"}]},
    {"name": "Eevee", "level": 50, "stats": {"hp": 100, "attack": 50, "defense": 50, "specialAttack": 50, "specialDefense": 50},
     "selectedMoves": [{"name": "Tackle", "power": "40", "type": "physical"}]},
]
OPPONENT = [
    {"name": "Golem", "level": 50, "stats": {"hp": 300, "attack": 100, "defense": 50, "specialAttack": 50, "specialDefense": 50},
     "selectedMoves": [{"name": "Rock Smash", "power": 40, "type": "physical"}]},
]


def make_service(tmp_path, **kw):
    settings = Settings(SettingsData(think_delay=2.0, seed=5), tmp_path / "settings.json")
    return BattleService(settings, rng=random.Random(5), **kw)


def test_commands_need_a_battle(tmp_path):
    service = make_service(tmp_path)
    with pytest.raises(IllegalActionError):
        service.choose_move(0)
    assert service.view() is None
    assert service.result() == {"outcome": "ONGOING", "battle_id": ""}


def test_empty_roster_cannot_start(tmp_path):
    service = make_service(tmp_path)
    with pytest.raises(InvalidRosterError):
        service.start_from_dicts([], OPPONENT)


def test_move_waits_for_the_think_delay(tmp_path):
    service = make_service(tmp_path)
    service.start_from_dicts(PLAYER, OPPONENT)
    view = service.choose_move(0)
    assert view.phase == "OPPONENT_CHOOSING"
    assert service.busy()
    service.tick(2.0)
    assert not service.busy()
    assert service.view().player.current_hp == 63


def test_switch_menu_is_ui_state_only(tmp_path):
    service = make_service(tmp_path)
    service.start_from_dicts(PLAYER, OPPONENT)
    assert service.open_switch_menu() is True
    service.close_switch_menu()
    assert service.switch_menu_open is False
    assert service.view().log == ()
    service.open_switch_menu()
    service.choose_switch(1)
    assert service.switch_menu_open is False
    # menu stays closed while the opponent is thinking
    assert service.open_switch_menu() is False
    service.pump()
    assert service.view().player.name == "Eevee"


def test_restart_abandons_battle_and_returns_to_team_selection(tmp_path):
    calls = []
    service = make_service(tmp_path, on_restart=lambda: calls.append("team_selection"))
    service.start_from_dicts(PLAYER, OPPONENT)
    service.choose_move(0)
    old_engine, old_sched = service.engine, service.scheduler
    service.restart()
    assert calls == ["team_selection"]
    assert service.engine is None and service.view() is None
    old_sched.advance(10)
    assert old_engine.view().player.current_hp == 100
    with pytest.raises(IllegalActionError):
        service.choose_move(0)


def test_starting_again_discards_previous_battle(tmp_path):
    service = make_service(tmp_path)
    service.start_from_dicts(PLAYER, OPPONENT)
    service.choose_move(0)
    old_sched = service.scheduler
    service.start_from_dicts(PLAYER, OPPONENT)
    assert not old_sched.pending
    assert service.view().log == ()
    assert service.battle_id == "battle_2"


def test_watchers_get_views_and_demo_runs_to_the_end(tmp_path):
    service = make_service(tmp_path)
    views = []
    service.watch(views.append)
    service.start_demo("starter_showdown")
    for _ in range(200):
        view = service.view()
        if view.over:
            break
        service.choose_move(0)
        service.pump()
    assert service.view().over
    assert service.result()["outcome"] in {"PLAYER_WIN", "OPPONENT_WIN"}
    assert views[0].headline == "A wild battle has begun!"
    assert views[-1].over


def test_demo_matchups_are_well_formed(tmp_path):
    service = make_service(tmp_path)
    for name in DEMO_MATCHUPS:
        view = service.start_demo(name)
        assert view.phase == "PLAYER_CHOOSING"
    with pytest.raises(KeyError):
        service.start_demo("missing")
