"""Main entry point for running the application locally."""

from teamboard import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)  # nosec
