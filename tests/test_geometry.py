"""
Tests for camera projection used to move the examination cursor.
"""

import numpy as np
import pytest

from turnabout_access.errors import ProjectionError
from turnabout_access.trackers.geometry import (
    depth_of,
    perspective,
    screen_to_world,
    world_to_screen,
)

VIEWPORT = (1920, 1080)


@pytest.fixture
def camera():
    return perspective(60.0, VIEWPORT[0] / VIEWPORT[1], 0.3, 100.0)


class TestProjection:
    """Tests for world_to_screen and depth_of."""

    def test_center_of_view(self, camera):
        screen = world_to_screen(camera, VIEWPORT, (0.0, 0.0, -5.0))
        assert screen[0] == pytest.approx(960.0)
        assert screen[1] == pytest.approx(540.0)
        assert screen[2] == pytest.approx(5.0)

    def test_right_and_up_are_positive(self, camera):
        screen = world_to_screen(camera, VIEWPORT, (1.0, 1.0, -5.0))
        assert screen[0] > 960.0
        assert screen[1] > 540.0

    def test_depth_is_view_distance(self, camera):
        assert depth_of(camera, (3.0, -2.0, -7.5)) == pytest.approx(7.5)

    def test_behind_camera(self, camera):
        with pytest.raises(ProjectionError):
            world_to_screen(camera, VIEWPORT, (0.0, 0.0, 5.0))

    def test_flat_matrix_accepted(self, camera):
        flat = camera.ravel().tolist()
        screen = world_to_screen(flat, VIEWPORT, (0.0, 0.0, -5.0))
        assert screen[0] == pytest.approx(960.0)

    @pytest.mark.parametrize("matrix", [
        [[1.0, 0.0], [0.0, 1.0]],
        np.full((4, 4), np.nan),
    ])
    def test_bad_matrix(self, matrix):
        with pytest.raises(ProjectionError):
            world_to_screen(matrix, VIEWPORT, (0.0, 0.0, -5.0))


class TestUnprojection:
    """Tests for screen_to_world."""

    def test_round_trip(self, camera):
        point = (0.4, -0.3, -6.0)
        screen = world_to_screen(camera, VIEWPORT, point)
        world = screen_to_world(camera, VIEWPORT, screen)
        np.testing.assert_allclose(world, point, atol=1e-6)

    def test_different_depth_stays_on_ray(self, camera):
        hotspot = (1.0, 0.5, -10.0)
        screen = world_to_screen(camera, VIEWPORT, hotspot)
        cursor = screen_to_world(camera, VIEWPORT, (screen[0], screen[1], 2.0))
        assert depth_of(camera, cursor) == pytest.approx(2.0)
        # Same pixel, closer to the camera
        back = world_to_screen(camera, VIEWPORT, cursor)
        assert back[:2] == pytest.approx(screen[:2], abs=1e-6)

    def test_singular_matrix(self):
        with pytest.raises(ProjectionError):
            screen_to_world(np.zeros((4, 4)), VIEWPORT, (10.0, 10.0, 1.0))

    def test_orthographic_has_no_depth(self):
        ortho = np.diag([0.1, 0.1, -0.02, 1.0])
        with pytest.raises(ProjectionError):
            screen_to_world(ortho, VIEWPORT, (10.0, 10.0, 1.0))

    def test_empty_viewport(self, camera):
        with pytest.raises(ProjectionError):
            screen_to_world(camera, (0, 0), (0.0, 0.0, 1.0))
