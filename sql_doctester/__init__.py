"""Run SQL examples embedded in source comments and Markdown as tests."""
