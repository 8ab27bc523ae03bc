"""webgrep.crawler: frontier, workers, pool and page fetchers of the concurrent crawl."""
