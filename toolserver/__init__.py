# HTTP surface for the search tools
