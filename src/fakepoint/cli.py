"""
Fakepoint CLI

Command-line interface for running a Fakepoint server and managing its
endpoints.

Commands:
    serve       - Start the server
    list        - List configured endpoints
    show        - Show one endpoint
    add         - Create an endpoint
    edit        - Change an endpoint
    toggle      - Enable or disable an endpoint
    remove      - Delete an endpoint

Examples:
    # Start the server with preloaded endpoints
    fakepoint serve --port 3001 --seed endpoints.yaml

    # Add an endpoint to a running server
    fakepoint add "Get Users" GET /users --body '[{"id": 1}]'

    # Make an existing endpoint fail
    fakepoint edit <id> --status 503
"""

import argparse
import logging
import sys

from requests import RequestException

from .client import EndpointClient, EndpointForm, FakepointAPIError
from .server import FakepointServer, ServerConfig


def cmd_serve(args):
    """
    Start the Fakepoint server.

    Args:
        args: Parsed command-line arguments
    """
    try:
        config = ServerConfig.from_env()
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)

    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.seed:
        config.seed_file = args.seed
    if args.log_level:
        config.log_level = args.log_level
    if args.no_cors:
        config.cors_enabled = False

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        server = FakepointServer(config=config)
    except Exception as e:
        print(f"❌ Failed to create server: {e}")
        sys.exit(1)

    try:
        server.start()
    except KeyboardInterrupt:
        print("\n\n👋 Fakepoint server stopped")


def cmd_list(args):
    """
    List endpoints on a running server.

    Args:
        args: Parsed command-line arguments
    """
    client = EndpointClient(args.api_url)
    endpoints = client.list_endpoints()

    if not endpoints:
        print("No endpoints configured")
        return

    print(f"📋 {len(endpoints)} endpoints:\n")
    for endpoint in endpoints:
        state = "on " if endpoint['enabled'] else "off"
        status = endpoint['response']['status']
        print(f"  [{state}] {endpoint['method']:<6} {endpoint['path']}  -> {status}  {endpoint['name']}")
        print(f"        id: {endpoint['id']}")


def cmd_show(args):
    """
    Show one endpoint with its full response.

    Args:
        args: Parsed command-line arguments
    """
    client = EndpointClient(args.api_url)
    endpoint = client.get_endpoint(args.id)
    form = EndpointForm.from_endpoint(endpoint)

    state = "enabled" if endpoint['enabled'] else "disabled"
    print(f"📄 {endpoint['name']} ({state})")
    print(f"   id:      {endpoint['id']}")
    print(f"   request: {endpoint['method']} {endpoint['path']}")
    print(f"   status:  {form.status}")
    print(f"   headers: {form.headers}")
    print(f"   body:    {form.body}")
    print(f"   updated: {endpoint.get('updatedAt', '-')}")


def _exit_on_invalid(form):
    errors = form.validate()
    if errors:
        print("❌ Invalid endpoint:")
        for field_name, message in errors.items():
            print(f"   • {field_name}: {message}")
        sys.exit(1)


def cmd_add(args):
    """
    Create an endpoint on a running server.

    Args:
        args: Parsed command-line arguments
    """
    form = EndpointForm(
        name=args.name,
        method=args.method,
        path=args.path,
        status=args.status,
        headers=args.headers,
        body=args.body
    )

    _exit_on_invalid(form)

    client = EndpointClient(args.api_url)
    endpoint = client.create_endpoint(form.to_request())
    print(f"✅ Created {endpoint['method']} {endpoint['path']} ({endpoint['id']})")


def cmd_edit(args):
    """
    Change an endpoint on a running server.

    The current definition prefills the form; only the given options
    replace its fields.

    Args:
        args: Parsed command-line arguments
    """
    client = EndpointClient(args.api_url)
    form = EndpointForm.from_endpoint(client.get_endpoint(args.id))

    for field_name in ('name', 'method', 'path', 'status', 'headers', 'body'):
        value = getattr(args, field_name)
        if value is not None:
            setattr(form, field_name, value)

    _exit_on_invalid(form)

    endpoint = client.update_endpoint(args.id, form.to_request())
    print(f"✅ Updated {endpoint['method']} {endpoint['path']} ({endpoint['id']})")


def cmd_toggle(args):
    """
    Enable or disable an endpoint.

    Args:
        args: Parsed command-line arguments
    """
    client = EndpointClient(args.api_url)
    endpoint = client.toggle_endpoint(args.id)
    state = "enabled" if endpoint['enabled'] else "disabled"
    print(f"✅ {endpoint['method']} {endpoint['path']} is now {state}")


def cmd_remove(args):
    """
    Delete an endpoint.

    Args:
        args: Parsed command-line arguments
    """
    client = EndpointClient(args.api_url)
    client.delete_endpoint(args.id)
    print(f"✅ Deleted {args.id}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog='fakepoint',
        description="Fakepoint - Fake HTTP endpoints for local development",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start the server
  %(prog)s serve --port 3001

  # Preload endpoints from a file
  %(prog)s serve --seed endpoints.yaml

  # Manage a running server
  %(prog)s list
  %(prog)s add "Get Users" GET /users --status 200 --body '[{"id": 1}]'
  %(prog)s show <id>
  %(prog)s edit <id> --status 503 --body '{"error": "down"}'
  %(prog)s toggle <id>
  %(prog)s remove <id>

The management API URL defaults to $FAKEPOINT_API_URL or
http://localhost:3001/api/management.
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # --- SERVE command ---
    serve_parser = subparsers.add_parser('serve', help='Start the server')
    serve_parser.add_argument('--host', help='Host to bind (default: 127.0.0.1 or $FAKEPOINT_HOST)')
    serve_parser.add_argument('-p', '--port', type=int, help='Port to bind (default: 3001 or $PORT)')
    serve_parser.add_argument('-s', '--seed', help='YAML or JSON file of endpoints to preload')
    serve_parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error'],
                              help='Log level (default: info)')
    serve_parser.add_argument('--no-cors', action='store_true', help='Disable CORS headers')
    serve_parser.set_defaults(func=cmd_serve)

    # --- LIST command ---
    list_parser = subparsers.add_parser('list', help='List endpoints')
    list_parser.add_argument('--api-url', help='Management API base URL')
    list_parser.set_defaults(func=cmd_list)

    # --- SHOW command ---
    show_parser = subparsers.add_parser('show', help='Show one endpoint')
    show_parser.add_argument('id', help='Endpoint id')
    show_parser.add_argument('--api-url', help='Management API base URL')
    show_parser.set_defaults(func=cmd_show)

    # --- ADD command ---
    add_parser = subparsers.add_parser('add', help='Create an endpoint')
    add_parser.add_argument('name', help='Endpoint name')
    add_parser.add_argument('method', help='HTTP method (GET, POST, PUT, DELETE, PATCH)')
    add_parser.add_argument('path', help='Request path, starting with /')
    add_parser.add_argument('--status', type=int, default=200, help='Response status (default: 200)')
    add_parser.add_argument('--headers', default='{}', help='Response headers as JSON (default: {})')
    add_parser.add_argument('--body', default='{}', help='Response body as JSON (default: {})')
    add_parser.add_argument('--api-url', help='Management API base URL')
    add_parser.set_defaults(func=cmd_add)

    # --- EDIT command ---
    edit_parser = subparsers.add_parser('edit', help='Change an endpoint')
    edit_parser.add_argument('id', help='Endpoint id')
    edit_parser.add_argument('--name', help='New endpoint name')
    edit_parser.add_argument('--method', help='New HTTP method')
    edit_parser.add_argument('--path', help='New request path, starting with /')
    edit_parser.add_argument('--status', type=int, help='New response status')
    edit_parser.add_argument('--headers', help='New response headers as JSON')
    edit_parser.add_argument('--body', help='New response body as JSON')
    edit_parser.add_argument('--api-url', help='Management API base URL')
    edit_parser.set_defaults(func=cmd_edit)

    # --- TOGGLE command ---
    toggle_parser = subparsers.add_parser('toggle', help='Enable or disable an endpoint')
    toggle_parser.add_argument('id', help='Endpoint id')
    toggle_parser.add_argument('--api-url', help='Management API base URL')
    toggle_parser.set_defaults(func=cmd_toggle)

    # --- REMOVE command ---
    remove_parser = subparsers.add_parser('remove', help='Delete an endpoint')
    remove_parser.add_argument('id', help='Endpoint id')
    remove_parser.add_argument('--api-url', help='Management API base URL')
    remove_parser.set_defaults(func=cmd_remove)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except FakepointAPIError as e:
        print(f"❌ Server rejected request ({e.status_code}): {e.error}")
        sys.exit(1)
    except RequestException as e:
        print(f"❌ Could not reach the management API: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
