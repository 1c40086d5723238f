"""Simple entrypoint to run the Lookbook API locally."""

import uvicorn


def main() -> None:
    uvicorn.run("server.api:create_app", factory=True, host="127.0.0.1", port=8080)


if __name__ == "__main__":
    main()
