"""Interactive terminal front end for the chat API."""

import argparse
import getpass
from collections.abc import Callable
from pathlib import Path

from gemini_chat.client.api import DEFAULT_BASE_URL, ChatApiClient
from gemini_chat.client.exceptions import APIError, AuthenticationError
from gemini_chat.client.session import ClientSession

HELP_TEXT = """Commands:
  /new               start a new conversation
  /sessions          list your conversations
  /open <id>         continue a conversation
  /rename <title>    rename the current conversation
  /delete [id]       delete a conversation (default: current)
  /history           show the current conversation
  /logout            sign out
  /help              show this help
  /quit              exit
Anything else is sent to the assistant."""


class ChatShell:
    """Read-eval-print loop over a ``ChatApiClient``.

    ``input_fn``, ``password_fn`` and ``output`` are injectable so the shell
    can be driven without a terminal.
    """

    def __init__(
        self,
        client: ChatApiClient,
        input_fn: Callable[[str], str] = input,
        password_fn: Callable[[str], str] = getpass.getpass,
        output: Callable[[str], None] = print,
    ) -> None:
        self.client = client
        self.input = input_fn
        self.password = password_fn
        self.output = output
        self.session_id: int | None = None

    # --- Sign-in ---

    def authenticate(self) -> bool:
        """Resume the stored login, or prompt until the user signs in."""
        self.client.session.load()
        try:
            user = self.client.validate()
        except APIError as exc:
            self.output(f"Error: {exc.message}")
            return False
        if user:
            self.output(f"Signed in as {user.get('name')} <{user.get('email')}>")
            return True

        try:
            return self._prompt_sign_in()
        except (EOFError, KeyboardInterrupt):
            self.output("")
            return False

    def _prompt_sign_in(self) -> bool:
        while True:
            choice = (
                self.input("[l]ogin, [r]egister, [g]oogle or [q]uit? ").strip().lower()
            )
            if choice in ("q", "quit"):
                return False
            try:
                if choice in ("l", "login"):
                    data = self.client.login(
                        self.input("Email: ").strip(), self.password("Password: ")
                    )
                elif choice in ("r", "register"):
                    data = self.client.register(
                        self.input("Name: ").strip(),
                        self.input("Email: ").strip(),
                        self.password("Password: "),
                    )
                elif choice in ("g", "google"):
                    data = self._google_sign_in()
                    if data is None:
                        continue
                else:
                    continue
            except APIError as exc:
                self.output(f"Error: {exc.message}")
                continue
            user = data.get("user") or {}
            self.output(f"Welcome, {user.get('name', '')}!")
            return True

    def _google_sign_in(self) -> dict | None:
        client_id = self.client.google_client_id()
        if not client_id:
            self.output("Google sign-in is not configured on this server.")
            return None
        self.output(f"Sign in with Google (client id {client_id}) and paste the ID token.")
        id_token = self.input("ID token: ").strip()
        if not id_token:
            return None
        return self.client.google_login(id_token)

    # --- Loop ---

    def run(self) -> int:
        if not self.authenticate():
            return 0
        self.output("Type a message, or /help for commands.")
        while True:
            try:
                line = self.input("> ")
            except (EOFError, KeyboardInterrupt):
                self.output("")
                return 0
            if not line.strip():
                continue
            try:
                if not self.handle(line.strip()):
                    return 0
            except AuthenticationError:
                self.output("Your session has expired. Please sign in again.")
                self.session_id = None
                if not self.authenticate():
                    return 0
            except APIError as exc:
                self.output(f"Error: {exc.message}")

    def handle(self, line: str) -> bool:
        """Process one line. Returns False when the shell should exit."""
        if not line.startswith("/"):
            self.send(line)
            return True

        command, _, arg = line.partition(" ")
        arg = arg.strip()
        match command:
            case "/quit" | "/exit":
                return False
            case "/help":
                self.output(HELP_TEXT)
            case "/new":
                self.session_id = None
                self.output("Started a new conversation.")
            case "/sessions":
                self.show_sessions()
            case "/open":
                self.open_session(arg)
            case "/rename":
                self.rename(arg)
            case "/delete":
                self.delete(arg)
            case "/history":
                self.show_history()
            case "/logout":
                self.client.logout()
                self.session_id = None
                self.output("Signed out.")
                return self.authenticate()
            case _:
                self.output(f"Unknown command {command}. Type /help.")
        return True

    # --- Commands ---

    def send(self, message: str) -> None:
        try:
            data = self.client.send_message(message, self.session_id)
        except APIError as exc:
            if exc.session_id is not None:
                self.session_id = exc.session_id
            raise
        self.session_id = data.get("sessionId", self.session_id)
        self.output(data.get("response") or "")

    def show_sessions(self) -> None:
        sessions = self.client.list_sessions()
        if not sessions:
            self.output("No conversations yet.")
            return
        for item in sessions:
            marker = "*" if item["id"] == self.session_id else " "
            self.output(
                f"{marker} {item['id']:>5}  {item['title']}  "
                f"({item.get('messageCount', 0)} messages)"
            )

    def open_session(self, arg: str) -> None:
        if not arg.isdigit():
            self.output("Usage: /open <id>")
            return
        session_id = int(arg)
        messages = self.client.get_messages(session_id)
        self.session_id = session_id
        self._print_messages(messages)

    def rename(self, title: str) -> None:
        if self.session_id is None:
            self.output("No conversation is open.")
            return
        if not title:
            self.output("Usage: /rename <title>")
            return
        self.client.rename_session(self.session_id, title)
        self.output("Renamed.")

    def delete(self, arg: str) -> None:
        if arg and not arg.isdigit():
            self.output("Usage: /delete [id]")
            return
        session_id = int(arg) if arg else self.session_id
        if session_id is None:
            self.output("No conversation is open.")
            return
        self.client.delete_session(session_id)
        if session_id == self.session_id:
            self.session_id = None
        self.output("Deleted.")

    def show_history(self) -> None:
        if self.session_id is None:
            self.output("No conversation is open.")
            return
        self._print_messages(self.client.get_messages(self.session_id))

    def _print_messages(self, messages: list[dict]) -> None:
        for message in messages:
            speaker = "You" if message["role"] == "user" else "Gemini"
            self.output(f"{speaker}: {message['content']}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gemini-chat",
        description="Chat with the organization's Gemini assistant.",
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_BASE_URL,
        help=f"API base URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--session-file",
        type=Path,
        default=None,
        help="Where to keep the login token",
    )
    args = parser.parse_args(argv)

    with ChatApiClient(args.url, session=ClientSession(args.session_file)) as client:
        return ChatShell(client).run()


if __name__ == "__main__":
    raise SystemExit(main())
