from flask import Response


def plain_text(message: str, status: int = 200) -> Response:
    return Response(message, status=status, mimetype='text/plain')
