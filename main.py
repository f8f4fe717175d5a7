#!/usr/bin/env python3
"""
Jira Test Case Generator

Fetch a Jira issue, let Gemini summarize it, suggest acceptance criteria and generate
structured test cases, and keep the results per user in a local document store.
"""

import click
import logging
import sys

from testgen.config import Config
from testgen.document_store import DocumentStore
from testgen.errors import TestGenError
from testgen.generator import TestCaseGenerator
from testgen.issue_client import IssueClient
from testgen.models import JiraSettings
from testgen.persistence import PersistenceGateway
from testgen.proxy_client import ProxyClient
from testgen.session import SessionState, Workbench


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.addHandler(console_handler)

    # Reduce noise from external libraries
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def create_workbench(config: Config, user_id: str) -> Workbench:
    """Create a workbench wired to the proxy and the document store from configuration"""
    proxy_client = ProxyClient(config.get_proxy_url(), timeout=config.get_proxy_timeout())
    field = config.get_acceptance_criteria_field()
    try:
        store = DocumentStore(config.get_db_path())
    except TestGenError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    persistence = PersistenceGateway(store, app_id=config.get_app_id())

    workbench = Workbench(
        state=SessionState(user_id=user_id),
        issue_client=IssueClient(proxy_client, acceptance_criteria_field=field),
        generator=TestCaseGenerator(proxy_client, acceptance_criteria_field=field),
        persistence=persistence
    )
    workbench.load_settings()
    return workbench


def report(workbench: Workbench, ok: bool = True):
    """Print the session messages; exit non-zero on failure"""
    state = workbench.state
    if state.success_message:
        click.echo(f"✅ {state.success_message}")
    if state.info_message:
        click.echo(f"ℹ️  {state.info_message}")
    if state.error_message:
        click.echo(f"❌ {state.error_message}", err=True)
    if not ok:
        sys.exit(1)


def print_test_cases(test_cases):
    for i, tc in enumerate(test_cases, 1):
        click.echo(f"\n{i}. [{tc.type}] {tc.title}")
        for step_no, step in enumerate(tc.steps, 1):
            click.echo(f"     {step_no}) {step}")


def fetch_or_exit(workbench: Workbench, issue_id: str):
    report(workbench, workbench.fetch_issue(issue_id))


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--user', '-u', default=None, help='User ID that owns saved settings and test cases')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, user, verbose):
    """Jira Test Case Generator"""
    setup_logging(verbose)

    try:
        config_obj = Config(config)
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    ctx.obj = {
        'config': config_obj,
        'user': user or config_obj.get_default_user_id()
    }


@cli.command()
@click.option('--host', default=None, help='Bind address (default from config)')
@click.option('--port', default=None, type=int, help='Port (default from config)')
@click.pass_context
def serve(ctx, host, port):
    """Run the outbound proxy server"""
    import uvicorn
    config = ctx.obj['config']

    if not config.validate():
        click.echo("⚠️  Starting anyway - /api/gemini will fail until the configuration is fixed", err=True)

    uvicorn.run(
        "api.main:app",
        host=host or str(config.server.get('host', '0.0.0.0')),
        port=port or int(config.server.get('port', 3001)),
        log_level="info"
    )


@cli.command()
@click.option('--url', prompt='Jira URL', help='Jira site URL, e.g. https://your-domain.atlassian.net')
@click.option('--username', prompt='Jira username (email)', help='Jira account email')
@click.option('--api-token', prompt='Jira API token', hide_input=True, help='Jira API token')
@click.pass_context
def configure(ctx, url, username, api_token):
    """Save Jira connection settings for the current user"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    settings = JiraSettings(jira_url=url, jira_username=username, jira_api_token=api_token)
    report(workbench, workbench.save_settings(settings))


@cli.command('show-config')
@click.pass_context
def show_config(ctx):
    """Show saved Jira connection settings (token masked)"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    settings = workbench.state.settings
    if not settings.is_complete():
        report(workbench, False)

    token = settings.jira_api_token
    masked = f"{token[:4]}{'*' * max(len(token) - 4, 0)}"
    click.echo(f"User:      {workbench.state.user_id}")
    click.echo(f"Jira URL:  {settings.jira_url}")
    click.echo(f"Username:  {settings.jira_username}")
    click.echo(f"API token: {masked}")
    click.echo(f"Updated:   {settings.last_updated or 'N/A'}")


@cli.command()
@click.pass_context
def status(ctx):
    """Check that the proxy is reachable and has a Gemini key"""
    config = ctx.obj['config']
    proxy_client = ProxyClient(config.get_proxy_url(), timeout=config.get_proxy_timeout())
    try:
        health = proxy_client.health_check()
    except TestGenError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(f"Proxy:  {config.get_proxy_url()} ({health.get('status', 'unknown')})")
    for service, state in (health.get('services') or {}).items():
        click.echo(f"  {service:<7} {state}")
    if health.get('status') != 'healthy':
        sys.exit(1)


@cli.command()
@click.argument('issue_id')
@click.pass_context
def fetch(ctx, issue_id):
    """Fetch a Jira issue and print the details sent to the LLM"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    fetch_or_exit(workbench, issue_id)
    click.echo("")
    click.echo(workbench.issue_client.format_for_llm(workbench.state.issue))


@cli.command()
@click.argument('issue_id')
@click.pass_context
def summarize(ctx, issue_id):
    """Summarize a Jira issue in 2-3 sentences"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    fetch_or_exit(workbench, issue_id)
    ok = workbench.summarize_issue()
    report(workbench, ok)
    click.echo(f"\n{workbench.state.summary}")


@cli.command()
@click.argument('issue_id')
@click.pass_context
def criteria(ctx, issue_id):
    """Suggest acceptance criteria for a Jira issue"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    fetch_or_exit(workbench, issue_id)
    ok = workbench.suggest_acceptance_criteria()
    report(workbench, ok)
    for criterion in workbench.state.acceptance_criteria:
        click.echo(f"  - {criterion}")


@cli.command()
@click.argument('issue_id')
@click.option('--save', is_flag=True, help='Save the generated test cases for this issue')
@click.pass_context
def generate(ctx, issue_id, save):
    """Generate positive, negative and edge-case test cases for a Jira issue"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    fetch_or_exit(workbench, issue_id)
    ok = workbench.generate_test_cases()
    report(workbench, ok)
    print_test_cases(workbench.state.test_cases)

    if save:
        click.echo("")
        report(workbench, workbench.save_test_cases())


@cli.command()
@click.argument('issue_id', required=False)
@click.pass_context
def saved(ctx, issue_id):
    """List saved test case sets, or show the one saved for ISSUE_ID"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])

    if issue_id:
        saved_set = workbench.load_saved_test_cases(issue_id)
        if saved_set is None:
            report(workbench, not workbench.state.error_message)
            return
        click.echo(f"{saved_set.issue_key or issue_id}: {saved_set.summary or ''} (saved {saved_set.saved_at})")
        print_test_cases(saved_set.test_cases)
        return

    saved_sets = workbench.list_saved_test_cases()
    report(workbench, not workbench.state.error_message)
    for key, saved_set in saved_sets.items():
        click.echo(f"  {key:<15} {len(saved_set.test_cases):>3} test cases  {saved_set.summary or ''}")


@cli.command('delete-saved')
@click.argument('issue_id')
@click.confirmation_option(prompt='Delete the saved test cases for this issue?')
@click.pass_context
def delete_saved(ctx, issue_id):
    """Delete the test cases saved for ISSUE_ID"""
    workbench = create_workbench(ctx.obj['config'], ctx.obj['user'])
    report(workbench, workbench.delete_saved_test_cases(issue_id))


if __name__ == '__main__':
    try:
        cli()
    except TestGenError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
