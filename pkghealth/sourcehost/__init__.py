"""Source-hosting platform access."""

from pkghealth.sourcehost.github import GitHubClient, RepoStats, extract_github_info

__all__ = ["GitHubClient", "RepoStats", "extract_github_info"]
