"""SustainaView: room sustainability recommendations, wishlists and greenovations."""
