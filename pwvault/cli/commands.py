"""CLI commands implemented with click.

`shell` is the interactive menu; the other commands unlock, act and (when
they change anything) save in one go.
"""
from __future__ import annotations
import logging, click
from pathlib import Path
from pwvault.config.settings import (
	CIPHERS, DEFAULT_CIPHER, DEFAULT_HASHER, DEFAULT_PASSWORD_LENGTH, HASHERS, LOG_FORMAT, LOG_LEVEL
)
from pwvault.lib.auth import AuthError
from pwvault.lib.crypto import CryptoError
from pwvault.lib.records import RecordError
from pwvault.lib.session import Session
from pwvault.lib.storage import StorageError

VAULT_ERRORS = (AuthError, CryptoError, RecordError, StorageError)

MENU = """
=== Password Manager ===
1. Add Entry
2. Get Entry
3. Delete Entry
4. List Services
5. Generate Password
6. Save and Exit"""

class ClickEchoHandler(logging.Handler):
	"""Send log records to whatever click considers stderr right now."""

	def emit(self, record):
		try:
			click.echo(self.format(record), err=True)
		except Exception:
			self.handleError(record)

def configure_logging(level: str) -> None:
	logger = logging.getLogger('pwvault')
	if not any(isinstance(h, ClickEchoHandler) for h in logger.handlers):
		handler = ClickEchoHandler()
		handler.setFormatter(logging.Formatter(LOG_FORMAT))
		logger.addHandler(handler)
	logger.setLevel(level)

def make_session(ctx: click.Context) -> Session:
	o = ctx.obj
	return Session(o['vault'], o['master_file'], o['cipher'])

def unlock(ctx: click.Context, password: str) -> Session:
	s = make_session(ctx)
	try:
		ok = s.open(password, ctx.obj['hasher'])
	except VAULT_ERRORS as e:
		click.echo(f'Error: {e}')
		ctx.exit(1)
	if not ok:
		click.echo('Invalid master password!')
		ctx.exit(1)
	if s.first_run:
		click.echo('Master password set.')
	if s.skipped:
		click.echo(f'Warning: {s.skipped} malformed vault line(s) skipped.', err=True)
	return s

def save(ctx: click.Context, s: Session) -> None:
	try:
		s.save()
	except StorageError as e:
		click.echo(f'Error: {e}')
		ctx.exit(1)

def show_record(record) -> None:
	click.echo(f"\nService: {record.service}\nUsername: {record.username}\nPassword: {record.password}")

def show_listing(rows) -> None:
	if not rows:
		click.echo('No entries saved')
		return
	click.echo('\n=== Saved Services ===')
	for service, username in sorted(rows):
		click.echo(f'{service} - {username}')

@click.group()
@click.option('--vault', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Vault data file (default: $VAULT_PATH or passwords.dat).')
@click.option('--master-file', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Master digest file (default: $VAULT_MASTER_PATH or master.hash).')
@click.option('--cipher', type=click.Choice(CIPHERS), default=DEFAULT_CIPHER, show_default=True, help='Transform used for passwords on save.')
@click.option('--hasher', type=click.Choice(HASHERS), default=DEFAULT_HASHER, show_default=True, help='Digest scheme for a new master password.')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']), default=LOG_LEVEL, show_default=True)
@click.pass_context
def cli(ctx, vault, master_file, cipher, hasher, log_level):
	"""pwvault: local credential vault behind a master password."""
	configure_logging(log_level)
	ctx.obj = {'vault': vault, 'master_file': master_file, 'cipher': cipher, 'hasher': hasher}

@cli.command()
@click.pass_context
def shell(ctx):
	"""Interactive menu; changes are written on "Save and Exit" only."""
	s = make_session(ctx)
	click.echo('Enter master password:' if s.gate.load() is not None else 'Setup new master password:')
	s = unlock(ctx, click.prompt('Enter password', hide_input=True))
	while True:
		click.echo(MENU)
		choice = click.prompt('\nEnter choice', default='', show_default=False).strip()
		if choice == '1':
			service = click.prompt('Service name')
			username = click.prompt('Username')
			password = click.prompt('Enter password', hide_input=True)
			try:
				s.add(service, username, password)
				click.echo('Entry added successfully')
			except RecordError as e:
				click.echo(f'Error: {e}')
		elif choice == '2':
			record = s.get(click.prompt('Service name'))
			if record:
				show_record(record)
			else:
				click.echo('Service not found')
		elif choice == '3':
			click.echo('Entry deleted' if s.delete(click.prompt('Service name')) else 'Service not found')
		elif choice == '4':
			show_listing(s.list())
		elif choice == '5':
			raw = click.prompt('Password length', default='', show_default=False)
			try:
				length = int(raw)
			except ValueError:
				length = DEFAULT_PASSWORD_LENGTH
			if length < 0:
				length = DEFAULT_PASSWORD_LENGTH
			click.echo(f'Generated password: {Session.generate(length)}')
		elif choice == '6':
			save(ctx, s)
			click.echo('Data saved')
			break
		else:
			click.echo('Invalid choice')

@cli.command()
@click.argument('service')
@click.option('--master', prompt='Master password', hide_input=True)
@click.option('--username', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_context
def add(ctx, service, master, username, password):
	"""Add or replace the entry for SERVICE."""
	s = unlock(ctx, master)
	try:
		s.add(service, username, password)
	except RecordError as e:
		click.echo(f'Error: {e}')
		ctx.exit(1)
	save(ctx, s)
	click.echo('Entry added successfully')

@cli.command()
@click.argument('service')
@click.option('--master', prompt='Master password', hide_input=True)
@click.pass_context
def get(ctx, service, master):
	"""Show the entry for SERVICE, password included."""
	record = unlock(ctx, master).get(service)
	if record:
		show_record(record)
	else:
		click.echo('Service not found')

@cli.command()
@click.argument('service')
@click.option('--master', prompt='Master password', hide_input=True)
@click.pass_context
def delete(ctx, service, master):
	s = unlock(ctx, master)
	if s.delete(service):
		save(ctx, s)
		click.echo('Entry deleted')
	else:
		click.echo('Service not found')

@cli.command('list')
@click.option('--master', prompt='Master password', hide_input=True)
@click.pass_context
def list_services(ctx, master):
	"""List services and usernames (never passwords)."""
	show_listing(unlock(ctx, master).list())

@cli.command()
@click.option('--length', type=click.IntRange(min=0), default=DEFAULT_PASSWORD_LENGTH, show_default=True)
def generate(length):
	"""Print a random password."""
	click.echo(Session.generate(length))
