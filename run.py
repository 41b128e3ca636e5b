from atas import create_app
from config import Config

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "form_service": app.extensions["form_service"],
        "report_service": app.extensions["report_service"],
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=Config.PORT, debug=Config.DEBUG)
