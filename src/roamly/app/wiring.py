# roamly/app/wiring.py
from roamly.app.controllers.animation import AnimationClock
from roamly.app.controllers.journey import JourneyController
from roamly.app.events import (
    AnimationFinished,
    CameraSettled,
    FrameTick,
    RevealDetails,
    SettleTimeout,
    StartMoving,
)
from roamly.sim.kernel import Kernel


def wire(
    kernel: Kernel,
    *,
    journey: JourneyController,
    animation: AnimationClock,
    viewport=None,
) -> None:
    k = kernel

    # animation loop
    k.on(FrameTick, animation.on_frame_tick)
    k.on(AnimationFinished, animation.on_animation_finished)  # → journey arrived

    # journey phases
    k.on(SettleTimeout, journey.on_settle_timeout)  # fallback when the camera never settles
    k.on(StartMoving, journey.on_start_moving)
    k.on(RevealDetails, journey.on_reveal_details)

    # camera adapters that settle through the kernel
    if viewport is not None and hasattr(viewport, "on_camera_settled"):
        k.on(CameraSettled, viewport.on_camera_settled)
