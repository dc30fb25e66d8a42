# modules: 面向业务的资源客户端与页面路由，依赖 core
