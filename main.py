"""
Galerkin BVP driver - solve, tabulate and (optionally) plot.

Usage:
    uv run python main.py
    uv run python main.py mesh.nodes=null mesh.n_elem=16
    uv run python main.py boundary.dirichlet_right=false solver.max_subintervals=200
"""

import logging
import sys
from pathlib import Path

import hydra
from hydra.core.hydra_config import HydraConfig
from omegaconf import DictConfig, OmegaConf

sys.path.insert(0, str(Path(__file__).parent / "src"))

from galerkin1d import (  # noqa: E402
    GalerkinParameters,
    GalerkinSolver,
    Mesh1d,
    build_basis,
    exact_solution_sin,
    l2_error,
    sample_solution,
    save_samples,
    uniform_mesh,
)

log = logging.getLogger(__name__)


def create_mesh(cfg: DictConfig) -> Mesh1d:
    if cfg.mesh.get("nodes"):
        return Mesh1d(list(cfg.mesh.nodes))
    return uniform_mesh(cfg.mesh.a, cfg.mesh.b, cfg.mesh.n_elem)


def run(cfg: DictConfig, output_dir: Path) -> dict:
    """Solve the configured problem and write results to ``output_dir``."""
    mesh = create_mesh(cfg)
    dirichlet = (bool(cfg.boundary.dirichlet_left), bool(cfg.boundary.dirichlet_right))
    basis = build_basis(mesh, *dirichlet, family=cfg.basis.family)
    log.info(f"Mesh: {mesh.nonodes} nodes on [{mesh.a}, {mesh.b}], {len(basis)} dof")

    params = GalerkinParameters(**OmegaConf.to_container(cfg.solver, resolve=True))
    solver = GalerkinSolver(params)
    coeffs = solver.solve(mesh, basis, dirichlet=dirichlet)

    # The analytic reference only holds for homogeneous Dirichlet conditions on [0, 1]
    has_reference = dirichlet == (True, True) and (mesh.a, mesh.b) == (0.0, 1.0)
    exact = exact_solution_sin if has_reference else None

    samples = sample_solution(coeffs, basis, exact, a=mesh.a, b=mesh.b, step=cfg.output.step)
    save_samples(samples, output_dir / cfg.output.samples_file)

    summary = {"n_dof": len(basis), **solver.metrics.to_dict()}
    if exact is not None:
        summary["max_abs_error"] = float(samples["error"].abs().max())
        summary["l2_error"] = l2_error(coeffs, basis, exact, mesh)
        log.info(
            f"Max error {summary['max_abs_error']:.3e}, L2 error {summary['l2_error']:.3e}"
        )

    if cfg.output.plot:
        from galerkin1d.plot_style import plot_solution, save_figure, setup_style

        setup_style()
        fig = plot_solution(samples, mesh, title=f"{mesh.noelms} elements")
        save_figure(fig, output_dir / cfg.output.figure_file)

    return summary


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    output_dir = Path(HydraConfig.get().runtime.output_dir)
    log.info(f"Config:\n{OmegaConf.to_yaml(cfg)}")
    summary = run(cfg, output_dir)
    log.info(f"Summary: {summary}")


if __name__ == "__main__":
    main()
