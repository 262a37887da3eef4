import time
from types import SimpleNamespace

from hybridcvrp.history import HistoricSolution, HistoryMessage, SearchHistory


def make_individual(routes, cost):
    return SimpleNamespace(phenotype=routes, penalized_cost=lambda: cost)


def test_historic_solution_from_individual_copies():
    routes = [[1, 2], [3]]
    solution = HistoricSolution.from_individual(make_individual(routes, 5.0))
    assert solution.routes == [[1, 2], [3]]
    assert solution.cost == 5.0
    routes[0].append(9)
    assert solution.routes[0] == [1, 2]


def test_historic_solution_text_skips_empty_routes():
    solution = HistoricSolution([[], [3, 4], [], [5]], 12.4)
    lines = str(solution).splitlines()
    assert lines[0] == "Route #1: 3 4"
    assert lines[1] == "Route #2: 5"
    assert lines[-1] == "Cost 12"
    assert len(lines) == 3


def test_cost_rounds_half_away_from_zero():
    assert str(HistoricSolution([], 2.5)).endswith("Cost 3")


def test_add_updates_best_and_clears_previous_routes():
    history = SearchHistory()
    history.add(make_individual([[1], [2]], 20.0))
    history.add(make_individual([[1, 2]], 15.0))
    assert history.best_cost == 15.0
    entries = history.entries()
    assert len(entries) == 2
    assert entries[0].solution.routes == []
    assert history.last_entry().solution.routes == [[1, 2]]
    assert entries[0].timestamp <= entries[1].timestamp


def test_last_entry_empty():
    assert SearchHistory().last_entry() is None


def test_add_message_timestamp():
    start = time.monotonic()
    history = SearchHistory(start_time=start)
    history.add_message("Resetting")
    assert history.messages[0].message == "Resetting"
    assert history.messages[0].timestamp >= 0.0


def test_message_text_contains_message():
    text = str(HistoryMessage(1.5, "hello"))
    assert text.startswith("Time: ")
    assert text.endswith(", hello")


def test_print_new_best_respects_flag(capsys):
    history = SearchHistory(print_new_best=True)
    history.set_log_new_best(False)
    history.add(make_individual([[1]], 4.0))
    assert capsys.readouterr().out == ""
    history.set_log_new_best(True)
    history.add(make_individual([[1]], 3.0))
    assert "Route #1: 1" in capsys.readouterr().out