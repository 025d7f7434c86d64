import matplotlib.pyplot as plt
import pytest

from toptw.classes.EarlyStopping import EarlyStoppingCriterion
from toptw.classes.GRASPConfig import GRASPConfig
from toptw.classes.GRASPProgressLogger import GRASPProgressLogger
from toptw.functions.Visualisation import plot_objectives, plot_solution
from toptw.toptw_grasp import main, solve_from_config, solve_toptw_with_grasp


class FakeSolution:
    def __init__(self, value):
        self.value = value

    def objective(self):
        return self.value


def test_solve_runs_every_iteration(random_instance):
    best, progress = solve_toptw_with_grasp(random_instance, max_iterations=6, rcl_size=3, seed=1,
                                            report_interval=2)

    assert progress.iteration_count == 6
    assert best.objective() == progress.best_objective
    assert best.is_feasible()


def test_solve_is_reproducible_with_seed(random_instance):
    first, _ = solve_toptw_with_grasp(random_instance, max_iterations=4, rcl_size=4, seed=21)
    second, _ = solve_toptw_with_grasp(random_instance, max_iterations=4, rcl_size=4, seed=21)
    assert first.get_routes() == second.get_routes()


def test_solve_stops_early_without_improvement(two_customer_instance):
    best, progress = solve_toptw_with_grasp(two_customer_instance, max_iterations=10, seed=0,
                                            patience_ratio=0.2)

    # every construction scores 30, so patience 2 runs out after three restarts
    assert progress.iteration_count == 3
    assert best.objective() == 30.0


def test_solve_from_config(tmp_path, instance_file_text):
    path = tmp_path / "c101.txt"
    path.write_text(instance_file_text)
    config = GRASPConfig(instance_path=str(path), iterations=3, rcl_size=2, seed=4)

    best, progress = solve_from_config(config)
    assert progress.iteration_count == 3
    assert best.is_feasible()
    assert best.instance.filename == "c101.txt"


def test_early_stopping_patience():
    criterion = EarlyStoppingCriterion(10, patience_ratio=0.3)
    assert criterion.patience == 3

    best = FakeSolution(5.0)
    assert not criterion(None, None, None)
    assert not criterion(None, best, best)
    assert not criterion(None, best, best)
    assert not criterion(None, best, best)
    assert criterion(None, best, best)
    assert criterion.iterations_without_improvement == 3


def test_early_stopping_improvement_resets_patience():
    criterion = EarlyStoppingCriterion(10, improvement_threshold=1.0, patience_ratio=0.2)

    assert not criterion(None, None, None)
    assert not criterion(None, FakeSolution(5.0), None)
    assert not criterion(None, FakeSolution(5.5), None)
    assert criterion.iterations_without_improvement == 1
    assert not criterion(None, FakeSolution(7.0), None)
    assert criterion.iterations_without_improvement == 0
    assert criterion.total_improvements == 1
    assert criterion.best_objective == 7.0


def test_early_stopping_respects_max_iterations():
    criterion = EarlyStoppingCriterion(2, patience_ratio=1.0)

    assert not criterion(None, None, None)
    assert not criterion(None, FakeSolution(1.0), None)
    assert criterion(None, FakeSolution(2.0), None)


@pytest.mark.parametrize("kwargs", [
    {"max_iterations": 0},
    {"max_iterations": 5, "patience_ratio": 0.0},
    {"max_iterations": 5, "patience_ratio": 1.5},
])
def test_early_stopping_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        EarlyStoppingCriterion(**kwargs)


def test_progress_logger_tracks_best_and_improvements():
    progress = GRASPProgressLogger(log_mode='improvement')
    for value in (5.0, 3.0, 8.0, 8.0):
        progress(FakeSolution(value))

    assert progress.current_objectives == [5.0, 3.0, 8.0, 8.0]
    assert progress.best_objectives == [5.0, 5.0, 8.0, 8.0]
    assert progress.improvements == [3]
    assert progress.best_objective == 8.0
    assert progress.average_objective == 6.0

    summary = progress.final_report()
    assert summary['iterations'] == 4
    assert summary['initial_objective'] == 5.0


def test_progress_logger_empty_and_invalid_mode():
    assert GRASPProgressLogger().final_report() == {}
    assert GRASPProgressLogger().average_objective == 0.0
    with pytest.raises(ValueError):
        GRASPProgressLogger(log_mode='verbose')


@pytest.mark.parametrize("kwargs", [
    {"instance_path": ""},
    {"instance_path": "x.txt", "iterations": 0},
    {"instance_path": "x.txt", "rcl_size": 0},
    {"instance_path": "x.txt", "alpha": 1.5},
    {"instance_path": "x.txt", "patience_ratio": 0.0},
    {"instance_path": "x.txt", "report_interval": 0},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        GRASPConfig(**kwargs)


def test_config_defaults():
    config = GRASPConfig(instance_path="x.txt")
    assert config.alpha == 0.8
    assert config.rcl_size == 3
    assert config.patience_ratio is None


def test_main_reports_every_rcl_size(tmp_path, instance_file_text, capsys):
    path = tmp_path / "c101.txt"
    path.write_text(instance_file_text)

    code = main([str(path), "--iterations", "3", "--rcl-size", "1", "2", "--seed", "1", "--show-solution"])
    out = capsys.readouterr().out

    assert code == 0
    assert out.count(" --> Instance: c101.txt") == 1
    assert "RCL 1: AVERAGE =" in out
    assert "RCL 2: AVERAGE =" in out
    assert "FEASIBLE = True" in out
    assert "FEASIBLE SOLUTION: True" in out


def test_main_missing_instance(tmp_path):
    assert main([str(tmp_path / "missing.txt"), "--iterations", "2"]) == 1


def test_main_rejects_bad_rcl_size(tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "c101.txt"), "--rcl-size", "0"])


def test_plots(two_customer_instance):
    best, progress = solve_toptw_with_grasp(two_customer_instance, max_iterations=3, seed=0)

    ax = plot_solution(best)
    assert len(ax.lines) == 1
    assert "score 30" in ax.get_title()

    ax = plot_objectives(progress)
    assert len(ax.lines) == 2
    assert list(ax.lines[1].get_ydata()) == progress.best_objectives
    plt.close('all')
