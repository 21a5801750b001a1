"""
CLI command handlers.

Handles: tssresolver resolve | init | status
"""

from tssresolver.core.config import Config
from tssresolver.errors import ResolverError
from tssresolver.resolver.facade import CredentialResolver
from tssresolver.resolver.mapping import FieldMapping


def handle_resolve(args, config: Config) -> int:
    """Resolve a secret and report which fields came back."""
    resolver = CredentialResolver(install_dir=config.install_dir, config_path=config.config_file)
    result = resolver.resolve({"id": args.id, "type": args.type})

    resolved = [key for key, value in result.items() if value is not None]

    print(f"Secret {args.id} as '{args.type}': {len(resolved)} of {len(result)} fields resolved\n")
    for key, value in result.items():
        if value is None:
            shown = "-"
        elif args.show_values:
            shown = value
        else:
            shown = f"**** ({len(value)} chars)"
        print(f"  {key:<14} {shown}")

    return 0 if resolved else 1


def handle_init(args, config: Config) -> int:
    """Register the tss client with Secret Server."""
    resolver = CredentialResolver(install_dir=config.install_dir, config_path=config.config_file)
    fetcher = resolver.build_fetcher(config)
    initializer = fetcher.initializer

    if initializer.is_initialized() and not args.force:
        print("SDK already initialized")
        print(f"Marker: {initializer.marker_path}")
        return 0

    print(f"Initializing tss client in {config.install_dir}...")
    try:
        initializer.ensure_initialized(force=args.force)
    except ResolverError as e:
        print(f"Error: {e}")
        return 1

    print("\n✓ SDK initialized")
    if initializer.qualifier_path.exists():
        print(f"  Warning: {initializer.qualifier_path.name} could not be removed")
    return 0


def handle_status(args, config: Config) -> int:
    """Show installation state."""
    mapping = FieldMapping.load(config.mapping_path)

    def mark(present: bool) -> str:
        return "✓" if present else "✗"

    print(f"SDK folder:    {config.install_dir}")
    print(f"Config file:   {config.config_file} {mark(config.config_file.exists())}")
    print(f"Executable:    {config.executable_path} {mark(config.executable_path.is_file())}")
    print(f"Initialized:   {mark(config.marker_path.exists())} ({config.marker_file})")
    print(f"Qualifier:     {mark(config.qualifier_path.exists())} ({config.qualifier_file})")
    print(f"Mapping table: {len(mapping)} entries ({config.mapping_file})")

    types = mapping.types()
    if types:
        print("\nCredential types:")
        for credential_type in types:
            fields = [canonical for _, canonical, _ in mapping.entries_for(credential_type)]
            print(f"  {credential_type}: {', '.join(fields)}")

    return 0 if config.executable_path.is_file() else 1
