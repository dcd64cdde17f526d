"""
Page Renderer - server-rendered HTML for the dashboard and the history list.

Pages are plain HTML/CSS strings. The only script is the small form handler
on the dashboard, which posts the "new copy" form as JSON to
/api/projects/generate.

Usage:
======
    from app.pages import PageRenderer

    renderer = PageRenderer()
    html = renderer.render_dashboard(user_email, connected=True, projects=projects)
    html = renderer.render_history(items, search_term="bakery")

Every piece of user content goes through html.escape.
"""

from datetime import datetime
from typing import List, Optional, Sequence
import html as html_escape

from app.models.project import Project
from app.schemas.usage import HistoryItem, is_web_link


# Badge colour per request status; anything else is gray
STATUS_COLORS = {
    "ready": "green",
    "pending": "yellow",
    "error": "red",
}

# Dashboard flash messages for the OAuth callback redirect flags
CALLBACK_ERROR_MESSAGES = {
    "auth_denied": "Google Drive access was denied.",
    "no_code": "Google did not return an authorization code. Please try again.",
    "auth_failed": "Google authentication failed. Please try again.",
    "db_save_failed": "Your Google Drive connection could not be saved. Please try again.",
}


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, "gray")


def flash_message(connected_flag: Optional[str], error_flag: Optional[str]) -> Optional[tuple]:
    """
    Map the callback query flags to a (kind, message) flash, or None.

    Unknown error codes still produce a generic error message.
    """
    if error_flag:
        message = CALLBACK_ERROR_MESSAGES.get(
            error_flag, "Something went wrong while connecting Google Drive."
        )
        return ("error", message)
    if connected_flag == "true":
        return ("success", "Google Drive connected successfully.")
    return None


class PageRenderer:
    """
    Renders the dashboard and history pages.

    Attributes:
        app_name: Shown in the page title and header
    """

    def __init__(self, app_name: str = "Website Copy Generator"):
        self.app_name = app_name

    def _get_css(self) -> str:
        return """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            font-size: 15px;
            line-height: 1.5;
            background: #f5f5f5;
            color: #1a1a1a;
            padding: 2rem;
        }
        .container { max-width: 1100px; margin: 0 auto; }
        header {
            display: flex;
            justify-content: space-between;
            align-items: center;
            margin-bottom: 2rem;
            padding-bottom: 1rem;
            border-bottom: 2px solid #e0e0e0;
        }
        header nav a { margin-left: 1rem; color: #1976d2; text-decoration: none; }
        h1 { font-size: 1.8rem; font-weight: 600; }
        .card {
            background: #ffffff;
            border-radius: 12px;
            padding: 1.5rem;
            margin-bottom: 1.5rem;
            box-shadow: 0 2px 8px rgba(0, 0, 0, 0.08);
        }
        .flash { padding: 0.75rem 1rem; border-radius: 8px; margin-bottom: 1.5rem; }
        .flash-success { background: #e8f5e9; color: #2e7d32; }
        .flash-error { background: #ffebee; color: #c62828; }
        .button {
            display: inline-block;
            background: #1976d2;
            color: #ffffff;
            padding: 0.5rem 1rem;
            border: none;
            border-radius: 8px;
            text-decoration: none;
            cursor: pointer;
        }
        label { display: block; font-weight: 500; margin: 0.75rem 0 0.25rem; }
        input, textarea {
            width: 100%;
            padding: 0.5rem 0.75rem;
            border: 1px solid #d0d0d0;
            border-radius: 8px;
            font: inherit;
        }
        textarea { min-height: 6rem; }
        table { width: 100%; border-collapse: collapse; }
        th {
            text-align: left;
            font-size: 0.75rem;
            text-transform: uppercase;
            color: #666666;
            padding: 0.5rem;
            border-bottom: 1px solid #e0e0e0;
        }
        td { padding: 0.75rem 0.5rem; border-bottom: 1px solid #f0f0f0; vertical-align: top; }
        .badge {
            display: inline-block;
            padding: 0.15rem 0.6rem;
            border-radius: 999px;
            font-size: 0.75rem;
            font-weight: 600;
        }
        .badge-green { background: #e8f5e9; color: #2e7d32; }
        .badge-yellow { background: #fff8e1; color: #f57f17; }
        .badge-red { background: #ffebee; color: #c62828; }
        .badge-gray { background: #eeeeee; color: #616161; }
        .output-error { color: #c62828; font-size: 0.8rem; }
        .muted { color: #8a8a9a; }
        .empty { text-align: center; padding: 3rem 1rem; color: #8a8a9a; }
        """

    def _page(self, title: str, body: str) -> str:
        safe_title = html_escape.escape(f"{title} | {self.app_name}")
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{safe_title}</title>
    <style>
    {self._get_css()}
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>{html_escape.escape(self.app_name)}</h1>
            <nav><a href="/dashboard">Dashboard</a><a href="/history">History</a></nav>
        </header>
        {body}
    </div>
</body>
</html>
"""

    def _format_date(self, value: Optional[datetime]) -> str:
        if value is None:
            return "-"
        return value.strftime("%b %d, %Y %H:%M")

    # -------------------------------------------------------------------------
    # DASHBOARD
    # -------------------------------------------------------------------------

    def _render_flash(self, flash: Optional[tuple]) -> str:
        if not flash:
            return ""
        kind, message = flash
        return f'<div class="flash flash-{kind}">{html_escape.escape(message)}</div>'

    def _render_connection(self, user_email: Optional[str], connected: bool) -> str:
        if connected and user_email:
            return f"""
        <div class="card">
            <strong>Google Drive connected</strong>
            <p class="muted">{html_escape.escape(user_email)}</p>
        </div>
        """
        return """
        <div class="card">
            <strong>Connect Your Google Drive</strong>
            <p class="muted">Connect your Google Drive to start creating and managing projects.</p>
            <p style="margin-top: 0.75rem"><a class="button" href="/api/auth/google-drive">Connect Google Drive</a></p>
        </div>
        """

    def _render_project_picker(self, projects: Sequence[Project]) -> str:
        if not projects:
            return ""
        options = "\n".join(
            f'<option value="{html_escape.escape(p.project_name)}"></option>'
            for p in projects
        )
        return f'<datalist id="project-names">{options}</datalist>'

    def _render_form(self, projects: Sequence[Project]) -> str:
        return f"""
        <div class="card">
            <h2>New copy</h2>
            <form id="generate-form">
                <label for="projectName">Project name</label>
                <input id="projectName" name="projectName" list="project-names" required>
                {self._render_project_picker(projects)}
                <label for="businessDetails">Business details</label>
                <textarea id="businessDetails" name="businessDetails" required></textarea>
                <label for="websiteStructure">Website structure</label>
                <textarea id="websiteStructure" name="websiteStructure" required></textarea>
                <p style="margin-top: 1rem"><button class="button" type="submit">Generate</button></p>
            </form>
            <p id="generate-result" class="muted"></p>
        </div>
        <script>
        document.getElementById("generate-form").addEventListener("submit", async (event) => {{
            event.preventDefault();
            const form = event.target;
            const result = document.getElementById("generate-result");
            const body = {{
                projectName: form.projectName.value,
                businessDetails: form.businessDetails.value,
                websiteStructure: form.websiteStructure.value,
            }};
            const response = await fetch("/api/projects/generate", {{
                method: "POST",
                credentials: "same-origin",
                headers: {{"Content-Type": "application/json"}},
                body: JSON.stringify(body),
            }});
            const data = await response.json().catch(() => ({{}}));
            result.textContent = response.ok
                ? "Request submitted. Check the history page for results."
                : (typeof data.detail === "string" ? data.detail : "Request failed.");
            if (response.ok) form.reset();
        }});
        </script>
        """

    def render_dashboard(
        self,
        user_email: Optional[str],
        connected: bool,
        projects: Optional[List[Project]] = None,
        flash: Optional[tuple] = None,
    ) -> str:
        """
        Render the dashboard page.

        Args:
            user_email: Session user's email, None without a session
            connected: Whether the user has an active Drive connection
            projects: The user's projects for the name picker
            flash: (kind, message) from flash_message()
        """
        body = (
            self._render_flash(flash)
            + self._render_connection(user_email, connected)
            + self._render_form(projects or [])
        )
        return self._page("Dashboard", body)

    # -------------------------------------------------------------------------
    # HISTORY
    # -------------------------------------------------------------------------

    def _render_output(self, item: HistoryItem) -> str:
        if item.output_link and is_web_link(item.output_link):
            href = html_escape.escape(item.output_link)
            return f'<a href="{href}" target="_blank" rel="noopener noreferrer">View Output</a>'
        if item.error_message:
            message = html_escape.escape(item.error_message)
            return f'<span class="output-error" title="{message}">Error</span>'
        return '<span class="muted">-</span>'

    def _render_row(self, item: HistoryItem) -> str:
        status = html_escape.escape(item.status)
        return f"""
            <tr>
                <td>{self._format_date(item.created_at)}</td>
                <td>{self._format_date(item.updated_at)}</td>
                <td><strong>{html_escape.escape(item.project_name)}</strong></td>
                <td>{html_escape.escape(item.business_details)}</td>
                <td>{html_escape.escape(item.website_structure)}</td>
                <td><span class="badge badge-{status_color(item.status)}">{status}</span></td>
                <td>{self._render_output(item)}</td>
            </tr>
            """

    def render_history(
        self,
        items: List[HistoryItem],
        search_term: Optional[str] = None,
    ) -> str:
        """Render the history table with a search box."""
        safe_search = html_escape.escape(search_term or "")

        search_form = f"""
        <form class="card" method="get" action="/history">
            <input name="q" value="{safe_search}" placeholder="Search by project name, business details, or structure...">
        </form>
        """

        if items:
            rows = "\n".join(self._render_row(item) for item in items)
            table = f"""
        <div class="card">
            <table>
                <thead>
                    <tr>
                        <th>Created</th>
                        <th>Last updated</th>
                        <th>Project name</th>
                        <th>Business details</th>
                        <th>Structure</th>
                        <th>Status</th>
                        <th>Output</th>
                    </tr>
                </thead>
                <tbody>{rows}</tbody>
            </table>
        </div>
        """
        else:
            hint = (
                "Try adjusting your search terms."
                if search_term
                else "Create your first project to see it here."
            )
            table = f"""
        <div class="card empty">
            <p>No requests found.</p>
            <p>{hint}</p>
        </div>
        """

        return self._page("History", search_form + table)

    def render_error(self, error_message: str, title: str = "Error") -> str:
        safe_message = html_escape.escape(error_message)
        return self._page(
            title,
            f'<div class="card empty"><p class="output-error">{safe_message}</p></div>',
        )

    def render_not_connected(self, title: str) -> str:
        """Page shown to visitors without a session."""
        return self._page(
            title,
            """
        <div class="card empty">
            <p>Connect your Google Drive to see your project history.</p>
            <p style="margin-top: 0.75rem"><a class="button" href="/api/auth/google-drive">Connect Google Drive</a></p>
        </div>
        """,
        )
