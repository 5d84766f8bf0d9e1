"""WSGI entry point, e.g. ``gunicorn app:app``.

Running the module directly starts the development server on ``PORT``
(default 27272).
"""

import os

from foodcup import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        debug=os.environ.get("FLASK_DEBUG", "").lower() in ["true", "1", "t"],
        host="0.0.0.0",  # nosec
        port=int(os.environ.get("PORT", "27272")),
    )
