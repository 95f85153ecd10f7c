"""
Faculty Publications - Multi-source publication reconciliation

Collects publications for a set of author names from PubMed, Scopus and
Web of Science, merges records describing the same paper, enriches them with
NIH iCite relative citation ratios, and computes summary bibliometrics.

Usage:
    from faculty_pubs.container import ApplicationContainer
    from faculty_pubs.shared.settings import AppSettings

    container = ApplicationContainer()
    container.config.from_dict(AppSettings.from_env(os.environ).to_dict())
    result = await container.engine().resolve_publications(["Jordan Lee"])

    for publication in result.publications:
        print(publication.title, publication.sources)
"""

__version__ = "0.1.0"
