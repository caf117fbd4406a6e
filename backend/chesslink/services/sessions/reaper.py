import time

from chesslink import socketio


def schedule_reap(app, registry, game_id: str, vacated_at: float) -> None:
    """Remove an empty session once its grace window has passed.

    - Grace of 0 (the test setting) removes the session right away
    - A join inside the window clears ``vacated_at`` and the reap becomes a no-op
    """
    grace = float(app.config.get('SESSION_GRACE_SEC', 30))
    if grace <= 0:
        registry.reap(game_id, vacated_at)
        return

    app.logger.info(f"[reap-set] game={game_id} grace={grace}s")

    def _worker(code: str, expected: float, delay: float):
        sleep_for = max(0.0, expected + delay - time.time())
        if sleep_for:
            time.sleep(sleep_for)
        if not registry.reap(code, expected):
            app.logger.info(f"[reap-skip] game={code} rejoined or already gone")

    socketio.start_background_task(_worker, game_id, vacated_at, grace)
