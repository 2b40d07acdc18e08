"""
Operator commands for the catalog database.

.. warning: ``populate-database`` is for dev/test purposes only.

"""
from typing import Optional

import click
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .services import products
from .services.database import create_all, make_engine
from .services.profiles import ProfileStore
from .domain import ProductFields, Role

SAMPLE_PRODUCTS = [
    ProductFields(name='Linen shirt', description='Hand stitched.',
                  status='active', images=['https://example.com/shirt-1.jpg',
                                           'https://example.com/shirt-2.jpg'],
                  price=49.0),
    ProductFields(name='Wool scarf', description='Winter collection.',
                  status='inactive', images=['https://example.com/scarf.jpg'],
                  price=25.5),
    ProductFields(name='Leather belt', status='active', images=[], price=30.0),
]


def _session_factory(database_url: Optional[str]) -> sessionmaker:
    settings = Settings.from_env()
    engine = make_engine(database_url or settings.database_url, settings.echo_sql)
    create_all(engine)
    return sessionmaker(autoflush=False, bind=engine)


@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None,
              help='SQLAlchemy URL; defaults to the configured DATABASE_URL.')
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Manage the catalog admin database."""
    ctx.obj = database_url


@cli.command('create-db')
@click.pass_obj
def create_db(database_url: Optional[str]) -> None:
    """Create all tables."""
    _session_factory(database_url)
    click.echo('Tables created.')


@cli.command('create-profile')
@click.option('--supabase-id', required=True,
              help='User id assigned by the identity provider.')
@click.option('--email', required=True)
@click.option('--name', default='')
@click.option('--phone', default='')
@click.option('--role', default=Role.ADMIN.value, show_default=True)
@click.pass_obj
def create_profile(database_url: Optional[str], supabase_id: str, email: str,
                   name: str, phone: str, role: str) -> None:
    """Provision the profile that grants an identity its role."""
    store = ProfileStore(_session_factory(database_url))
    profile = store.create_profile(supabase_id, email=email, name=name,
                                   phone=phone, role=role)
    click.echo(f'Profile for {profile.email} created with role {profile.role}.')


@cli.command('populate-database')
@click.pass_obj
def populate_database(database_url: Optional[str]) -> None:
    """Add a few sample products."""
    SessionLocal = _session_factory(database_url)
    with SessionLocal() as db:
        for fields in SAMPLE_PRODUCTS:
            products.create(db, fields)
    click.echo(f'{len(SAMPLE_PRODUCTS)} products added.')


if __name__ == '__main__':
    cli()
