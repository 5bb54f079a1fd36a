"""Process entrypoint: load config, log boot diagnostics, serve HTTP."""

from hypanel.application_factory import create_app
from hypanel.core.config import load_panel_config


def boot_diagnostics(config):
    """Return a one-line summary of the directories and unit being managed."""
    return (
        f"service={config.service_name}; "
        f"server_dir={config.server_dir} exists={config.server_dir.is_dir()}; "
        f"backup_dir={config.backup_dir} exists={config.backup_dir.is_dir()}; "
        f"dist_dir={config.dist_dir} exists={(config.dist_dir / 'index.html').is_file()}; "
        f"resolve_symlinks={config.resolve_symlinks}; use_sudo={config.use_sudo}"
    )


def run_server(config=None):
    """Build the app, then start the Flask server."""
    if config is None:
        config = load_panel_config()
    app = create_app(config)
    state = app.extensions["panel_state"]
    host, port = config.web_host, config.web_port
    state.log_action("boot-start", command=f"host={host} port={port}")
    state.log_action("boot", command=boot_diagnostics(config))
    try:
        app.run(host=host, port=port, threaded=True)
    except Exception as exc:
        state.log_exception("boot_step/app.run", exc)
        state.log_action("boot-failed", command="app.run", rejection_message=str(exc)[:500] or "web server startup failed")
        raise


if __name__ == "__main__":
    run_server()
