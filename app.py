from src.site_checkin.site_checkin.main import create_app

app = create_app()


if __name__ == "__main__":
    # Run the sweep in-process for local development; deployments use scripts/run_scheduler.py
    if app.config.get("RUN_SCHEDULER"):
        app.extensions["site_checkin"].scheduler.start()
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"], use_reloader=False)
