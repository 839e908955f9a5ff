GREETINGS = "greetings"
MAIN_MENU = "mainMenu"
ORDER_DINNER = "orderDinner"
ORDER_FLOW = "orderFlow"
RESERVE_TABLE = "reserveTable"
