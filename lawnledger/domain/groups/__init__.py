"""Customer group domain - group CRUD and the assignment board"""
