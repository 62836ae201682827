import os

from splitboard import create_app

app = create_app()
if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    app.logger.info("Starting Splitboard API on 0.0.0.0:%s", port)
    app.run(host='0.0.0.0', port=port, debug=os.getenv("FLASK_DEBUG", "false").lower() in ("true", "1", "yes"))
