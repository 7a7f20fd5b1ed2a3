"""
Click CLI for the OAuth consumer.

Fetches an OAuth protected resource from the command line, walking the user
through authorization unless an access token is supplied together with the
request token it was exchanged for. Tokens are printed so they can be
passed back in on the next run; nothing is stored.
"""

import logging
import sys
import webbrowser
from pathlib import Path
from typing import List, Optional, Tuple

import click
import requests

from .config import ServiceConfiguration
from .exceptions import ConfigurationError, OAuthConsumerError, OAuthProtocolError
from .models import Token, TokenStatus
from .request import OAuthRequest

logger = logging.getLogger(__name__)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def print_token(label: str, token: Token) -> None:
    click.secho(f"{label}:", bold=True, err=True)
    click.echo(f"  token:  {token.value}", err=True)
    click.echo(f"  secret: {token.secret}", err=True)


def parse_parameters(values: Tuple[str, ...]) -> List[Tuple[str, str]]:
    """Parse repeated ``name=value`` options."""
    pairs = []
    for value in values:
        name, sep, param_value = value.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {value!r}", param_hint="--param")
        pairs.append((name, param_value))
    return pairs


def load_service(ctx: click.Context) -> ServiceConfiguration:
    config_file = ctx.obj.get("config_file")
    try:
        if config_file:
            return ServiceConfiguration.load_from_file(Path(config_file))
        return ServiceConfiguration.from_env()
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    envvar="OAUTH_CONFIG_FILE",
    help="YAML service configuration (environment variables override it)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], verbose: bool) -> None:
    """
    OAuth 1.0a consumer - fetch protected resources.

    Service configuration is read from --config-file and/or OAUTH_*
    environment variables.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("resource_url")
@click.option("--request-token", help="Previously obtained request token")
@click.option("--request-secret", default="", help="Secret of the request token")
@click.option(
    "--authorized",
    is_flag=True,
    help="The request token has already been authorized",
)
@click.option(
    "--access-token",
    help="Previously obtained access token (used together with --request-token)",
)
@click.option("--access-secret", default="", help="Secret of the access token")
@click.option("--param", "-p", "params", multiple=True, help="Resource parameter as name=value")
@click.option(
    "--wait/--no-wait",
    default=True,
    help="Wait for authorization in this session or stop and print the request token",
)
@click.option("--open-browser", is_flag=True, help="Open the authorization URL in a browser")
@click.option("--callback", help="Callback URL passed to the authorization page")
@click.pass_context
def fetch(
    ctx: click.Context,
    resource_url: str,
    request_token: Optional[str],
    request_secret: str,
    authorized: bool,
    access_token: Optional[str],
    access_secret: str,
    params: Tuple[str, ...],
    wait: bool,
    open_browser: bool,
    callback: Optional[str],
) -> None:
    """
    Fetch a protected resource.

    \b
    Examples:
      oauth-consumer fetch https://api.example.com/user
      oauth-consumer fetch https://api.example.com/user --no-wait
      oauth-consumer fetch https://api.example.com/user \\
          --request-token abc --request-secret xyz --authorized
      oauth-consumer fetch https://api.example.com/photos -p size=original \\
          --request-token abc --request-secret xyz --authorized \\
          --access-token def --access-secret uvw
    """
    service = load_service(ctx)
    parameters = parse_parameters(params)
    if access_token and not request_token:
        click.echo(
            "Ignoring --access-token without --request-token; starting a new authorization",
            err=True,
        )
    logger.debug(f"Fetching {resource_url}")

    def authorize(token: Token) -> bool:
        if service.authorization_url:
            url = service.build_authorization_url(token, callback)
            click.echo("Authorize this request at:", err=True)
            click.echo(f"  {url}", err=True)
            if open_browser:
                webbrowser.open(url)
        else:
            click.echo(
                f"Authorize request token {token.value} with the service provider",
                err=True,
            )

        if not wait:
            return False

        if not click.confirm("Continue once authorization is complete?", default=True, err=True):
            return False

        verifier = click.prompt(
            "Verifier (leave blank if none)", default="", show_default=False, err=True
        )
        if verifier:
            token.verifier = verifier
        return True

    request = OAuthRequest(
        resource_url,
        service,
        request_token=(
            Token.request(
                request_token,
                request_secret,
                TokenStatus.AUTHORIZED if authorized else TokenStatus.UNAUTHORIZED,
            )
            if request_token
            else None
        ),
        access_token=Token.access(access_token, access_secret) if access_token else None,
        authorization_handler=authorize,
    )

    try:
        response = request.get_resource(parameters)
    except OAuthProtocolError as e:
        message = f"Service provider reported {e.problem}"
        if e.advice:
            message = f"{message}: {e.advice}"
        if e.parameters:
            message = f"{message} (parameters: {', '.join(sorted(e.parameters))})"
        print_error(message)
        sys.exit(1)
    except OAuthConsumerError as e:
        print_error(str(e))
        sys.exit(1)
    except requests.RequestException as e:
        print_error(f"Network error: {e}")
        sys.exit(1)

    if not response.has_protected_resource:
        print_token("Request token", response.token)
        click.echo(
            "Complete authorization, then run again with "
            "--request-token/--request-secret and --authorized",
            err=True,
        )
        return

    print_token("Request token", request.request_token)
    print_token("Access token", response.token)
    click.echo(response.resource.text)


@cli.command("authorize-url")
@click.argument("request_token")
@click.option("--callback", help="Callback URL passed to the authorization page")
@click.pass_context
def authorize_url(ctx: click.Context, request_token: str, callback: Optional[str]) -> None:
    """Print the user authorization URL for a request token."""
    service = load_service(ctx)
    try:
        url = service.build_authorization_url(Token.request(request_token, ""), callback)
    except ConfigurationError as e:
        print_error(str(e))
        sys.exit(1)
    click.echo(url)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
