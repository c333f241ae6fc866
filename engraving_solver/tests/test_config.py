import logging

from engraving_solver.src.utils import config_loader
from engraving_solver.src.utils.logger import get_logger


def test_bundled_defaults():
    assert config_loader.MAX_PIECES == 8
    assert config_loader.STANDALONE_MAX_SOLUTIONS is None
    assert config_loader.MAX_SOLUTIONS_PER_CANDIDATE == 15
    assert config_loader.TIME_BUDGET_MS == 30000
    assert config_loader.PREVIEW_SIZE == 5


def test_setters_update_config():
    old = config_loader.TIME_BUDGET_MS
    try:
        config_loader.set_time_budget_ms(500)
        assert config_loader.TIME_BUDGET_MS == 500
        assert config_loader.SOLVER_CONFIG["best_target"]["time_budget_ms"] == 500
    finally:
        config_loader.set_time_budget_ms(old)


def test_get_logger_file_handler(tmp_path):
    log_file = tmp_path / "logs" / "solver.log"
    logger = get_logger("engraving_solver.test_config", file_path=str(log_file), level="DEBUG")
    assert logger.level == logging.DEBUG
    logger.debug("SOLVER hello")
    for handler in logger.handlers:
        handler.flush()
    assert "SOLVER hello" in log_file.read_text()


def test_solution_cap_setters(monkeypatch):
    monkeypatch.setitem(config_loader.SOLVER_CONFIG, "solver", dict(config_loader.SOLVER_CONFIG.get("solver", {})))
    monkeypatch.setitem(
        config_loader.SOLVER_CONFIG, "best_target", dict(config_loader.SOLVER_CONFIG.get("best_target", {}))
    )
    for name in ("STANDALONE_MAX_SOLUTIONS", "MAX_SOLUTIONS_PER_CANDIDATE", "PREVIEW_SIZE"):
        monkeypatch.setattr(config_loader, name, getattr(config_loader, name))

    config_loader.set_standalone_max_solutions(3)
    config_loader.set_max_solutions_per_candidate(7)
    config_loader.set_preview_size(2)
    assert config_loader.STANDALONE_MAX_SOLUTIONS == 3
    assert config_loader.MAX_SOLUTIONS_PER_CANDIDATE == 7
    assert config_loader.PREVIEW_SIZE == 2
    assert config_loader.SOLVER_CONFIG["solver"]["standalone_max_solutions"] == 3
    assert config_loader.SOLVER_CONFIG["best_target"]["max_solutions_per_candidate"] == 7
    assert config_loader.SOLVER_CONFIG["best_target"]["preview_size"] == 2


def test_standalone_cap_applies_to_solve(monkeypatch):
    from engraving_solver.src.core.grid import EngravingGrid
    from engraving_solver.src.core.inventory import Inventory
    from engraving_solver.src.data.shape_registry import load_shape_registry
    from engraving_solver.src.executor.solver import solve

    monkeypatch.setattr(config_loader, "STANDALONE_MAX_SOLUTIONS", 1)
    inventory = Inventory.from_preset("atk-gold", load_shape_registry())
    grid = EngravingGrid.from_mask([[1] * 4 for _ in range(4)])
    assert len(solve(grid, inventory.available())) == 1
