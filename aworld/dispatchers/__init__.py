"""State changes applied to characters, items and relations."""