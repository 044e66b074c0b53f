"""Vercel serverless function for tallying ballot files."""

import json
import sys
from pathlib import Path
from urllib.parse import urlparse

import httpx

# Add the project root to the path so we can import runoff modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from runoff.ranking import DEFAULT_TIEBREAK  # noqa: E402
from runoff.tally import TallyError, tally_ballot_file  # noqa: E402

FETCH_TIMEOUT = 30.0


def handler(request):
    """Handle incoming requests to tally a ballot file.

    Accepts:
    - POST with JSON body: {"url": "https://...", "tiebreak": "id"}
    - POST with multipart form: file upload with 'file' field and optional
      'filename' and 'tiebreak' fields

    Returns JSON with the winner and round-by-round results.
    """
    # Handle CORS preflight
    if request.method == "OPTIONS":
        return create_response(
            "",
            status=204,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )

    if request.method != "POST":
        return create_response(
            {"error": "Method not allowed. Use POST."},
            status=405,
        )

    try:
        content_type = request.headers.get("content-type", "")

        if "application/json" in content_type:
            # JSON body with URL
            body = request.body.decode("utf-8")
            data = json.loads(body)
            if not isinstance(data, dict):
                return create_response(
                    {"error": "Request body must be a JSON object"},
                    status=400,
                )
            url = data.get("url")
            tiebreak = data.get("tiebreak") or DEFAULT_TIEBREAK

            if not url:
                return create_response(
                    {"error": "Missing 'url' in request body"},
                    status=400,
                )

            source, content = fetch_url(url)

        elif "multipart/form-data" in content_type:
            # File upload
            file_data = request.files.get("file")
            if not file_data:
                return create_response(
                    {"error": "Missing 'file' in form data"},
                    status=400,
                )

            source = request.form.get("filename", file_data.filename or "upload")
            tiebreak = request.form.get("tiebreak") or DEFAULT_TIEBREAK
            content = file_data.read()

        else:
            return create_response(
                {"error": f"Unsupported content type: {content_type}"},
                status=400,
            )

        result = tally_ballot_file(source, content, tiebreak=tiebreak)

        return create_response(result.to_dict())

    except TallyError as e:
        return create_response(
            {"error": str(e)},
            status=400,
        )
    except json.JSONDecodeError as e:
        return create_response(
            {"error": f"Invalid JSON: {e}"},
            status=400,
        )
    except Exception as e:
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


def fetch_url(url: str) -> tuple[str, bytes]:
    """Fetch a ballot file from a URL.

    Returns (source_identifier, content_bytes).
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise TallyError(f"Invalid URL scheme: {parsed.scheme}")

    try:
        with httpx.Client(follow_redirects=True, timeout=FETCH_TIMEOUT) as client:
            response = client.get(url)
            response.raise_for_status()
            return url, response.content
    except httpx.HTTPStatusError as e:
        raise TallyError(f"HTTP error fetching URL: {e.response.status_code}")
    except httpx.RequestError as e:
        raise TallyError(f"Error fetching URL: {e}")


def create_response(body, status: int = 200, headers: dict = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    # Return in format expected by Vercel Python runtime
    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
