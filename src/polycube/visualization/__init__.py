from polycube.visualization.text_render import (
    describe_orientations,
    describe_solution,
    render_grid,
)

__all__ = ["render_grid", "describe_solution", "describe_orientations"]
