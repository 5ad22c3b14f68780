from concurrent.futures import ThreadPoolExecutor

import pytest

from iEdit.core.adjustment_state import AdjustmentState
from iEdit.core.compositor import render
from iEdit.core.render_scheduler import RenderJob, RenderScheduler
from iEdit.errors import RenderError


@pytest.fixture
def manual():
    """State and scheduler whose jobs queue up until the test completes them."""

    state = AdjustmentState()
    jobs: list[RenderJob] = []
    scheduler = RenderScheduler(state, jobs.append)
    scheduler.attach()
    return state, scheduler, jobs


def _finish(scheduler: RenderScheduler, job: RenderJob) -> bool:
    surface = render(job.bitmap, job.parameters, generation=job.generation)
    return scheduler.complete(job.job_id, surface)


def test_no_job_without_bitmap(manual) -> None:
    state, scheduler, jobs = manual
    state.set_parameter("brightness", 120)
    assert scheduler.request_render() is None
    assert jobs == []


def test_job_ids_increase(manual, gradient_bitmap) -> None:
    state, scheduler, jobs = manual
    state.load(gradient_bitmap)
    state.set_parameter("brightness", 120)
    state.set_parameter("brightness", 140)
    assert [job.job_id for job in jobs] == sorted({job.job_id for job in jobs})
    assert jobs[-1].parameters.brightness == 140


def test_only_the_newest_result_is_published(manual, gradient_bitmap) -> None:
    state, scheduler, jobs = manual
    published = []
    scheduler.on_surface(published.append)
    state.load(gradient_bitmap)
    state.set_parameter("rotation", 90)
    older, newer = jobs

    assert _finish(scheduler, newer)
    assert not _finish(scheduler, older)

    assert len(published) == 1
    assert scheduler.latest_surface() is published[0]
    assert scheduler.latest_surface().parameters.rotation == 90


def test_stale_result_arriving_first_is_dropped(manual, gradient_bitmap) -> None:
    state, scheduler, jobs = manual
    state.load(gradient_bitmap)
    state.set_parameter("scale", 0.5)
    older, newer = jobs

    assert not _finish(scheduler, older)
    assert scheduler.latest_surface() is None
    assert _finish(scheduler, newer)


def test_load_cancels_outstanding_renders(manual, gradient_bitmap, make_bitmap) -> None:
    state, scheduler, jobs = manual
    state.load(gradient_bitmap)
    state.set_parameter("blur", 4)
    stale = jobs[-1]

    state.load(make_bitmap(5, 5))
    fresh = jobs[-1]

    assert not scheduler.is_current(stale.job_id)
    assert not _finish(scheduler, stale)
    assert _finish(scheduler, fresh)
    assert scheduler.latest_surface().size == (5, 5)
    assert not scheduler.has_pending()


def test_render_job_aborts_after_new_load(manual, gradient_bitmap, make_bitmap) -> None:
    state, scheduler, jobs = manual
    state.load(gradient_bitmap)
    stale = jobs[-1]
    state.load(make_bitmap(3, 3))
    with pytest.raises(RenderError):
        scheduler.render_job(stale)


def test_failure_keeps_previous_surface(manual, gradient_bitmap) -> None:
    state, scheduler, jobs = manual
    errors = []
    scheduler.on_error(errors.append)
    state.load(gradient_bitmap)
    assert _finish(scheduler, jobs[-1])
    previous = scheduler.latest_surface()

    state.set_parameter("brightness", 0)
    assert scheduler.fail(jobs[-1].job_id, RenderError("out of memory"))

    assert scheduler.latest_surface() is previous
    assert [str(error) for error in errors] == ["out of memory"]


def test_inline_dispatch_publishes_immediately(gradient_bitmap) -> None:
    state = AdjustmentState()
    scheduler = RenderScheduler(state)
    scheduler.attach()
    state.load(gradient_bitmap)
    state.set_parameter("saturation", 0)

    surface = scheduler.latest_surface()
    assert surface is not None
    assert surface.parameters.saturation == 0

    scheduler.detach()
    state.set_parameter("saturation", 50)
    assert scheduler.latest_surface() is surface


def test_threaded_renders_settle_on_the_last_change(gradient_bitmap) -> None:
    state = AdjustmentState()
    with ThreadPoolExecutor(max_workers=4) as pool:
        scheduler = RenderScheduler(state, lambda job: pool.submit(scheduler.render_inline, job))
        scheduler.attach()
        state.load(gradient_bitmap)
        for value in range(0, 200, 10):
            state.set_parameter("brightness", value)

    surface = scheduler.latest_surface()
    assert surface is not None
    assert surface.parameters == state.current_parameters()
    assert surface.same_pixels(render(gradient_bitmap, state.current_parameters()))


def test_allocation_failure_keeps_previous_surface(gradient_bitmap, monkeypatch) -> None:
    state = AdjustmentState()
    scheduler = RenderScheduler(state)
    scheduler.attach()
    errors = []
    scheduler.on_error(errors.append)
    state.load(gradient_bitmap)
    previous = scheduler.latest_surface()
    assert previous is not None

    monkeypatch.setattr("iEdit.core.compositor.MAX_SURFACE_PIXELS", 10)
    state.set_parameter("brightness", 150)

    assert scheduler.latest_surface() is previous
    assert len(errors) == 1
    assert isinstance(errors[0], RenderError)


def test_job_without_bitmap_raises_render_error() -> None:
    job = RenderJob(1, AdjustmentState().snapshot())
    with pytest.raises(RenderError):
        job.bitmap
