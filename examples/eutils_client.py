#!/usr/bin/env python3
"""
Example client for the NCBI E-utilities.

This script shows how to fetch E-utility responses with httpx and hand
them to eutils_data for parsing: database descriptions, a search with
server history, links to another database and document summaries.
"""

from typing import Dict, List, Optional, Any
import httpx

from eutils_data import Info, Link, Query, Summary, load_eutil


class EUtilsClient:
    """Client for the NCBI E-utilities endpoints."""

    def __init__(
        self,
        base_url: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/",
        email: Optional[str] = None,
        api_key: Optional[str] = None,
    ):
        """Initialize the client with the E-utilities base URL."""
        self.base_url = base_url
        self.client = httpx.Client(base_url=base_url, timeout=30.0)
        self.default_params: Dict[str, str] = {"tool": "eutils-data-example"}
        if email:
            self.default_params["email"] = email
        if api_key:
            self.default_params["api_key"] = api_key

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close the client."""
        self.client.close()

    def _get(self, eutil: str, params: Dict[str, Any]) -> httpx.Response:
        response = self.client.get(f"{eutil}.fcgi", params={**self.default_params, **params})
        response.raise_for_status()
        return response

    def einfo(self, db: Optional[str] = None) -> Info:
        """
        Describe one database, or list all of them.

        Args:
            db: Database name; omit for the database list

        Returns:
            Unparsed Info result
        """
        params = {"db": db} if db else {}
        return load_eutil("einfo", response=self._get("einfo", params))

    def esearch(self, db: str, term: str, retmax: int = 20, usehistory: bool = False) -> Query:
        """
        Search a database.

        Args:
            db: Database name
            term: Entrez query
            retmax: Maximum number of IDs returned
            usehistory: Keep the result set on the server

        Returns:
            Unparsed Query result
        """
        params = {"db": db, "term": term, "retmax": retmax}
        if usehistory:
            params["usehistory"] = "y"
        response = self._get("esearch", params)
        return load_eutil("esearch", response=response, database=db, term=term)

    def elink(self, dbfrom: str, db: str, ids: List[str], cmd: str = "neighbor") -> Link:
        """
        Find records linked to ``ids``.

        Args:
            dbfrom: Database the IDs belong to
            db: Database to link to
            ids: Record IDs
            cmd: elink command (neighbor, neighbor_history, ncheck, llinks...)

        Returns:
            Unparsed Link result
        """
        params = {"dbfrom": dbfrom, "db": db, "id": ",".join(ids), "cmd": cmd}
        return load_eutil("elink", response=self._get("elink", params))

    def esummary(self, db: str, ids: List[str]) -> Summary:
        """Fetch document summaries for ``ids``."""
        response = self._get("esummary", {"db": db, "id": ",".join(ids)})
        return load_eutil("esummary", response=response, database=db)


def main():
    """Run example operations."""

    print("NCBI E-utilities Client Example")
    print("=" * 50)

    with EUtilsClient() as client:
        # 1. Database description
        print("\n1. Describing the pubmed database...")
        info = client.einfo("pubmed")
        print(f"   Records: {info.get_record_count()}")
        print(f"   Last update: {info.get_last_update()}")
        for field in info.get_FieldInfo()[:5]:
            print(f"   - [{field.get_field_code()}] {field.get_field_name()}")

        # 2. Search with server history
        print("\n2. Searching pubmed for 'asthma[titl]'...")
        search = client.esearch("pubmed", "asthma[titl]", retmax=5, usehistory=True)
        print(f"   Count: {search.get_count()}")
        print(f"   IDs: {', '.join(search.get_ids())}")
        if search.has_History():
            webenv, query_key = search.history()
            print(f"   WebEnv: {webenv[:20]}... QueryKey: {query_key}")

        # 3. Links to protein
        print("\n3. Linking the first IDs to protein...")
        link = client.elink("pubmed", "protein", search.get_ids()[:2])
        print(f"   Link set kind: {link.get_linkset_kind()}")
        for linkset in link.get_LinkSets():
            print(f"   {linkset.get_link_name()}: {len(linkset.get_ids())} IDs")

        # 4. Document summaries
        print("\n4. Summaries of the search results...")
        summary = client.esummary("pubmed", search.get_ids()[:3])
        while (docsum := summary.next_DocSum()) is not None:
            titles = docsum.get_contents_by_name("Title")
            print(f"   {docsum.get_id()}: {titles[0] if titles else '(no title)'}")


if __name__ == "__main__":
    try:
        main()
    except httpx.ConnectError:
        print("\nError: Could not connect to the E-utilities server.")
    except Exception as e:
        print(f"\nError: {e}")
